# storage.py
#
# Description:
# This file contains the JSON persistence layer. JsonStorage reads and writes
# the whole data file as a JSON array of plain dictionaries and translates
# low-level I/O and JSON errors into the store error types below. It knows
# nothing about tasks; TaskManager builds Task objects on top of it.
#

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class StoreError(Exception):
    """Base class for every failure raised by the task store."""


class ReadFailure(StoreError):
    """The data file could not be read."""


class ParseFailure(StoreError):
    """The data file does not contain a valid sequence of task records."""


class WriteFailure(StoreError):
    """The data file could not be written."""


class SerializeFailure(StoreError):
    """The tasks could not be encoded as JSON."""


class IndexOutOfRange(StoreError):
    """An index does not point at an existing task."""


class JsonStorage:
    """Reads and writes a JSON array of records from a single file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def ensure_exists(self) -> None:
        """Creates the parent directory and an empty list file if missing."""
        if self.path.exists():
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("[]", encoding="utf-8")
        except OSError as exc:
            raise WriteFailure(f"Error creating the data file {self.path}: {exc}") from exc
        logger.info("Created empty data file %s", self.path)

    def load(self) -> List[Record]:
        """
        Loads every record from the data file.

        Raises:
            ReadFailure: The file is missing or unreadable.
            ParseFailure: The content is not a JSON array of objects.
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ReadFailure(f"Error reading the data file {self.path}: {exc}") from exc

        try:
            data = json.loads(content)
        except json.JSONDecodeError as exc:
            raise ParseFailure(f"Error parsing the data file {self.path}: {exc}") from exc

        if not isinstance(data, list):
            raise ParseFailure(f"Error parsing the data file {self.path}: expected a JSON array")
        for item in data:
            if not isinstance(item, dict):
                raise ParseFailure(f"Error parsing the data file {self.path}: expected JSON objects")
        return data

    def save(self, records: List[Record]) -> None:
        """
        Overwrites the data file with the given records.

        Raises:
            SerializeFailure: A record holds a value JSON cannot encode.
            WriteFailure: The file could not be written.
        """
        # Encode first so a bad record never truncates the existing file.
        try:
            content = json.dumps(records, indent=4, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise SerializeFailure(f"Error serializing tasks: {exc}") from exc

        try:
            self.path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise WriteFailure(f"Error writing the data file {self.path}: {exc}") from exc
