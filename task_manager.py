# task_manager.py
#
# Description:
# This file contains the core logic for managing tasks. It defines the Task
# data structure and a TaskManager class that performs every store operation
# as a full load-modify-save cycle against a storage backend. Nothing is
# cached between calls, so every answer reflects the file as it is now.
#

import datetime
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from storage import IndexOutOfRange, JsonStorage, ParseFailure

logger = logging.getLogger(__name__)

# fromisoformat() only understands up to microseconds on older interpreters.
_EXTRA_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def parse_timestamp(value: str) -> datetime.datetime:
    """Parses an ISO-8601 timestamp, accepting a trailing 'Z' for UTC."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _EXTRA_FRACTION_RE.sub(r"\1", text)
    return datetime.datetime.fromisoformat(text)


def format_timestamp(value: datetime.datetime) -> str:
    return value.isoformat()


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


@dataclass(frozen=True)
class Task:
    """
    Represents a single to-do entry.

    Attributes:
        id: Unique among the tasks currently stored; assigned as the last
            task's id + 1, or 0 for an empty list.
        name: Free-form text shown in the list.
        created_at: The timestamp when the task was created.
        completed_at: The completion timestamp, or None while open.
    """
    id: int
    name: str
    created_at: datetime.datetime
    completed_at: Optional[datetime.datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": format_timestamp(self.created_at),
            "completed_at": format_timestamp(self.completed_at) if self.completed_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """
        Builds a Task from one persisted record.

        Raises:
            ParseFailure: A field is missing or has the wrong type.
        """
        try:
            task_id = data["id"]
            name = data["name"]
            created_raw = data["created_at"]
            completed_raw = data.get("completed_at")
        except KeyError as exc:
            raise ParseFailure(f"Task record is missing field {exc}") from exc

        # bool is an int subclass, but `true` is not a valid id.
        if isinstance(task_id, bool) or not isinstance(task_id, int) or task_id < 0:
            raise ParseFailure(f"Task id must be a non-negative integer, got {task_id!r}")
        if not isinstance(name, str):
            raise ParseFailure(f"Task name must be a string, got {name!r}")
        if not isinstance(created_raw, str):
            raise ParseFailure(f"Task created_at must be a timestamp string, got {created_raw!r}")
        if completed_raw is not None and not isinstance(completed_raw, str):
            raise ParseFailure(f"Task completed_at must be a timestamp string or null, got {completed_raw!r}")

        try:
            created_at = parse_timestamp(created_raw)
            completed_at = parse_timestamp(completed_raw) if completed_raw is not None else None
        except ValueError as exc:
            raise ParseFailure(f"Invalid timestamp in task {task_id}: {exc}") from exc

        return cls(id=task_id, name=name, created_at=created_at, completed_at=completed_at)


def next_task_id(tasks: List[Task]) -> int:
    """Returns the id for a task appended to `tasks`."""
    return tasks[-1].id + 1 if tasks else 0


class TaskManager:
    """
    The task store: an ordered list of tasks persisted through a storage
    backend. Every method reads the backend afresh; mutating methods write
    the whole list back before returning it.
    """
    def __init__(self, storage: JsonStorage, clock: Callable[[], datetime.datetime] = utc_now):
        """
        Initializes the TaskManager with a storage backend.

        Args:
            storage: An instance of a storage class (e.g., JsonStorage)
                     that has load() and save() methods.
            clock: Returns the creation timestamp for new tasks.
        """
        self.storage = storage
        self.clock = clock

    def load(self) -> List[Task]:
        """Loads the ordered task list."""
        return [Task.from_dict(record) for record in self.storage.load()]

    def save(self, tasks: List[Task]) -> None:
        """Overwrites the stored list with `tasks`."""
        self.storage.save([task.to_dict() for task in tasks])

    def count(self) -> int:
        return len(self.load())

    def add(self, name: str) -> List[Task]:
        """
        Appends a new open task.

        Args:
            name: The name of the new task.

        Returns:
            The updated task list, as saved.
        """
        tasks = self.load()
        task = Task(id=next_task_id(tasks), name=name, created_at=self.clock())
        tasks.append(task)
        self.save(tasks)
        logger.info("Added task %d (%r)", task.id, name)
        return tasks

    def remove_at(self, index: int) -> List[Task]:
        """
        Removes the task at a 0-based position.

        Args:
            index: Position in the current list.

        Returns:
            The updated task list, as saved.

        Raises:
            IndexOutOfRange: `index` does not point at a task. Nothing is
                written in that case.
        """
        tasks = self.load()
        if not 0 <= index < len(tasks):
            raise IndexOutOfRange(f"No task at index {index} (list has {len(tasks)})")
        removed = tasks.pop(index)
        self.save(tasks)
        logger.info("Removed task %d (%r) at index %d", removed.id, removed.name, index)
        return tasks
