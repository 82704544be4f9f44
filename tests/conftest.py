"""Pytest configuration and fixtures for dottpl tests."""

from collections.abc import Callable, Iterator
from typing import Any

import pytest

from dottpl import compile_template, get_default_settings, set_default_settings


@pytest.fixture
def render() -> Callable[..., str]:
    """Compile and render in one step: ``render(text, data, **settings)``."""

    def _render(text: str, data: Any = None, **settings: Any) -> str:
        fn = compile_template(text, settings or None)
        return fn({} if data is None else data)

    return _render


@pytest.fixture
def restore_default_settings() -> Iterator[None]:
    """Put the process-wide default settings back after the test."""
    saved = get_default_settings()
    yield
    set_default_settings(saved)


def assert_contains(template_result: str, *expected_parts: str) -> None:
    """Assert template result contains all expected parts.

    Args:
        template_result: The actual template rendering result.
        expected_parts: Strings that should all be present in the result.
    """
    for part in expected_parts:
        assert part in template_result, (
            f"Template output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {template_result!r}"
        )
