# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from storage import JsonStorage
from task_manager import TaskManager

from .fakes import FIXED_NOW


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    """Path to an empty task file in a per-test directory."""
    path = tmp_path / "data" / "db.json"
    path.parent.mkdir()
    path.write_text("[]", encoding="utf-8")
    return path


@pytest.fixture()
def empty_store(db_path: Path) -> TaskManager:
    return TaskManager(JsonStorage(db_path), clock=lambda: FIXED_NOW)


@pytest.fixture()
def store(empty_store: TaskManager) -> TaskManager:
    """Store holding three tasks with ids 0, 1 and 2."""
    for name in ("write report", "buy milk", "call mom"):
        empty_store.add(name)
    return empty_store
