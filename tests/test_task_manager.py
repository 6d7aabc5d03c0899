# tests/test_task_manager.py

from __future__ import annotations

import datetime
import json
from pathlib import Path

import pytest

from storage import IndexOutOfRange, JsonStorage, ParseFailure, ReadFailure
from task_manager import Task, TaskManager, next_task_id, parse_timestamp

from .fakes import FIXED_NOW


def _ids(tasks: list[Task]) -> list[int]:
    return [t.id for t in tasks]


def test_add_to_empty_store_starts_at_zero(empty_store: TaskManager, db_path: Path) -> None:
    empty_store.add("buy milk")

    tasks = empty_store.load()
    assert len(tasks) == 1
    assert tasks[0].id == 0
    assert tasks[0].name == "buy milk"
    assert tasks[0].completed_at is None
    assert tasks[0].created_at == FIXED_NOW

    record = json.loads(db_path.read_text(encoding="utf-8"))[0]
    assert record == {
        "id": 0,
        "name": "buy milk",
        "created_at": "2024-05-01T12:30:15.123456+00:00",
        "completed_at": None,
    }


def test_add_uses_last_id_plus_one(store: TaskManager) -> None:
    before = store.load()
    after = store.add("water plants")

    assert len(after) == len(before) + 1
    assert after[-1].id == before[-1].id + 1
    assert after == store.load()


def test_add_follows_last_task_not_max_id(store: TaskManager) -> None:
    store.remove_at(2)
    tasks = store.add("again")

    assert _ids(tasks) == [0, 1, 2]


def test_ids_restart_after_store_is_emptied(store: TaskManager) -> None:
    for _ in range(3):
        store.remove_at(0)

    assert _ids(store.add("fresh start")) == [0]


@pytest.mark.parametrize("index", [0, 1, 2])
def test_remove_at_keeps_order_of_survivors(store: TaskManager, index: int) -> None:
    before = store.load()
    after = store.remove_at(index)

    assert len(after) == len(before) - 1
    assert after == before[:index] + before[index + 1:]
    assert store.load() == after


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_remove_at_out_of_range_leaves_file_alone(store: TaskManager, db_path: Path, index: int) -> None:
    content = db_path.read_text(encoding="utf-8")

    with pytest.raises(IndexOutOfRange):
        store.remove_at(index)

    assert db_path.read_text(encoding="utf-8") == content


def test_remove_at_on_empty_store(empty_store: TaskManager) -> None:
    with pytest.raises(IndexOutOfRange):
        empty_store.remove_at(0)


def test_save_of_load_does_not_change_file(store: TaskManager, db_path: Path) -> None:
    content = db_path.read_text(encoding="utf-8")

    store.save(store.load())

    assert db_path.read_text(encoding="utf-8") == content


def test_count_reads_the_file_every_time(store: TaskManager, db_path: Path) -> None:
    other = TaskManager(JsonStorage(db_path))
    other.add("added elsewhere")

    assert store.count() == 4


def test_load_missing_file_is_read_failure(tmp_path: Path) -> None:
    store = TaskManager(JsonStorage(tmp_path / "nope.json"))

    with pytest.raises(ReadFailure):
        store.load()


@pytest.mark.parametrize(
    "record",
    [
        {"name": "no id", "created_at": "2024-01-01T00:00:00+00:00", "completed_at": None},
        {"id": -1, "name": "negative", "created_at": "2024-01-01T00:00:00+00:00", "completed_at": None},
        {"id": True, "name": "bool id", "created_at": "2024-01-01T00:00:00+00:00", "completed_at": None},
        {"id": 0, "name": 7, "created_at": "2024-01-01T00:00:00+00:00", "completed_at": None},
        {"id": 0, "name": "bad date", "created_at": "yesterday", "completed_at": None},
        {"id": 0, "name": "bad completion", "created_at": "2024-01-01T00:00:00+00:00", "completed_at": 5},
    ],
)
def test_invalid_records_are_parse_failures(db_path: Path, record: dict) -> None:
    db_path.write_text(json.dumps([record]), encoding="utf-8")

    with pytest.raises(ParseFailure):
        TaskManager(JsonStorage(db_path)).load()


def test_reads_files_with_utc_z_and_nanoseconds(db_path: Path) -> None:
    db_path.write_text(
        json.dumps([
            {
                "id": 4,
                "name": "from elsewhere",
                "created_at": "2023-03-01T10:20:30.123456789Z",
                "completed_at": "2023-03-02T08:00:00Z",
            }
        ]),
        encoding="utf-8",
    )

    (task,) = TaskManager(JsonStorage(db_path)).load()

    assert task.id == 4
    assert task.created_at == datetime.datetime(2023, 3, 1, 10, 20, 30, 123456, tzinfo=datetime.timezone.utc)
    assert task.completed_at == datetime.datetime(2023, 3, 2, 8, 0, tzinfo=datetime.timezone.utc)


def test_parse_timestamp_keeps_offsets() -> None:
    value = parse_timestamp("2024-05-01T14:00:00+02:00")

    assert value.utcoffset() == datetime.timedelta(hours=2)


def test_next_task_id() -> None:
    task = Task(id=41, name="x", created_at=FIXED_NOW)

    assert next_task_id([]) == 0
    assert next_task_id([task]) == 42
