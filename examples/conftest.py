"""Fixtures for the example apps.

Each test gets the ``app`` defined by the ``app.py`` beside it, executed
from scratch so module-level state (todos, the counter, contacts)
starts empty every time.
"""

import runpy
from pathlib import Path

import pytest


@pytest.fixture
def example_app(request: pytest.FixtureRequest):
    source = Path(request.path).with_name("app.py")
    namespace = runpy.run_path(str(source), run_name=f"wren_example_{source.parent.name}")
    return namespace["app"]
