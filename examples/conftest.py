"""Shared pytest configuration for dottpl examples.

Provides the ``example_app`` fixture: the globals of the ``app.py`` next to
the requesting test, exposed as attributes. app.py is re-run for every test,
so templates are compiled afresh each time.
"""

import runpy
from pathlib import Path
from types import SimpleNamespace

import pytest


@pytest.fixture
def example_app(request: pytest.FixtureRequest) -> SimpleNamespace:
    """Run the sibling app.py (without its ``main``) and return its globals."""
    app_path = Path(request.path).parent / "app.py"
    assert app_path.is_file(), f"{app_path} not found"
    app_globals = runpy.run_path(str(app_path), run_name=f"example_{app_path.parent.name}")
    return SimpleNamespace(**app_globals)
