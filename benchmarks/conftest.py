"""Shared fixtures for dottpl benchmarks.

Render benchmarks compile each (template, settings) pair once per session so
that the timed call is the render function alone.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from dottpl import compile_template

CompiledRender = Callable[[Any], str]


@pytest.fixture(scope="session")
def compiled() -> Callable[..., CompiledRender]:
    """Return ``compile(text, **settings)``, caching one render function per key."""
    cache: dict[tuple[str, tuple[tuple[str, Any], ...]], CompiledRender] = {}

    def get(text: str, **settings: Any) -> CompiledRender:
        key = (text, tuple(sorted(settings.items())))
        if key not in cache:
            cache[key] = compile_template(text, settings)
        return cache[key]

    return get
