"""Pytest configuration for taskcanvas tests."""

import logging
import os
import sys
from pathlib import Path

import pytest

# Make the package importable without installing it
package_root = Path(__file__).parent.parent
if str(package_root) not in sys.path:
    sys.path.insert(0, str(package_root))

from taskcanvas.models import Dimensions, LayoutElement, LayoutOptions, TaskRecord  # noqa: E402
from taskcanvas.models.layout import LayoutConstraints  # noqa: E402
from taskcanvas.persistence import JsonFileViewportStore  # noqa: E402


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep TASKCANVAS_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("TASKCANVAS_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handler/level changes made by setup_logging() during a test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def example_elements():
    """Root 100x40 with two 80x30 children."""
    return [
        LayoutElement(id="root", dimensions=Dimensions(width=100, height=40)),
        LayoutElement(id="c1", dimensions=Dimensions(width=80, height=30), parent_id="root"),
        LayoutElement(id="c2", dimensions=Dimensions(width=80, height=30), parent_id="root"),
    ]


@pytest.fixture
def example_options():
    """min_distance 20, padding 10, default screen bounds."""
    return LayoutOptions(constraints=LayoutConstraints(min_distance=20), padding=10)


@pytest.fixture
def project_tasks():
    """
    Project tree:

        project
        ├── a
        │   ├── a1
        │   └── a2
        │       └── a2x
        └── b
    """
    return [
        TaskRecord(id="project", title="Project", is_project=True),
        TaskRecord(id="a", title="Task A", parent_id="project"),
        TaskRecord(id="b", title="Task B", parent_id="project", description="second"),
        TaskRecord(id="a1", title="Subtask A1", parent_id="a"),
        TaskRecord(id="a2", title="Subtask A2", parent_id="a"),
        TaskRecord(id="a2x", title="Leaf", parent_id="a2", width=200, height=90),
    ]


@pytest.fixture
def viewport_dir(tmp_path):
    return tmp_path / "viewport"


@pytest.fixture
def viewport_store(viewport_dir):
    return JsonFileViewportStore(user_id="u1", project_id="p1", storage_dir=viewport_dir)
