from __future__ import annotations

from typing import Any


def build_small_context() -> dict[str, Any]:
    """Small context: a handful of scalars and a short list."""
    return {
        "title": "Products",
        "user": {"name": "Ada", "admin": False},
        "items": [{"id": i, "name": f"Item {i}"} for i in range(5)],
    }


def build_large_context() -> dict[str, Any]:
    """Large context: 1000 rows with nested fields."""
    return {
        "title": "Report",
        "user": {"name": "Ada", "admin": True},
        "items": [
            {
                "id": i,
                "name": f"Item {i}",
                "price": i * 1.5,
                "tags": [f"tag{j}" for j in range(i % 4)],
            }
            for i in range(1000)
        ],
    }


SMALL_CONTEXT = build_small_context()
LARGE_CONTEXT = build_large_context()
