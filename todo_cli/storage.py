"""Storage layer for todo-cli.

This module provides an abstract storage interface and the JSON file
implementation used to persist the todo list between invocations. The
JsonStorage implementation holds an fcntl lock while reading or writing
the file.
"""

import fcntl
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple

from todo_cli.models import Status, Task

logger = logging.getLogger(__name__)

DEFAULT_FILE_PATH = "tasks.json"


class TaskDataError(ValueError):
    """Raised when persisted state exists but cannot be parsed."""


def _positive_int(value, name: str) -> int:
    # bool is an int subclass; JSON true/false are not ids
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")
    return value


def _string(value, name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string, got {value!r}")
    return value


def _check_ids(tasks: List[Task], next_id: int) -> None:
    """Reject duplicate ids and a counter that would hand out a used id."""
    ids = [task.id for task in tasks]
    if len(ids) != len(set(ids)):
        raise ValueError("duplicate task ids")
    if ids and next_id <= max(ids):
        raise ValueError(f"next_id {next_id} is not greater than every task id")


class Storage(ABC):
    """Abstract base class for todo list storage implementations."""

    @abstractmethod
    def save(self, tasks: List[Task], next_id: int) -> None:
        """Save the task list and id counter, replacing any previous state.

        Args:
            tasks: Tasks in insertion order
            next_id: Identifier the next added task will receive
        """
        pass

    @abstractmethod
    def load(self) -> Tuple[List[Task], int]:
        """Load the task list and id counter.

        Returns:
            Tuple of (tasks in insertion order, next_id)
        """
        pass


class JsonStorage(Storage):
    """JSON file-based storage implementation with file locking.

    The file holds a single object::

        {"tasks": [{"id": 1, "description": "...", "status": "Todo"}], "next_id": 2}

    Attributes:
        file_path: Path to the JSON storage file
    """

    def __init__(self, file_path: Optional[str] = None):
        """Initialize JsonStorage with a file path.

        Args:
            file_path: Path to the JSON file for storage. If None, uses
                      tasks.json in the current working directory
        """
        self.file_path = Path(file_path or DEFAULT_FILE_PATH)

    def save(self, tasks: List[Task], next_id: int) -> None:
        """Save tasks to the JSON file with file locking.

        Args:
            tasks: Tasks in insertion order
            next_id: Identifier the next added task will receive

        Raises:
            OSError: If the file cannot be written
        """
        # Ensure parent directory exists
        self.file_path.parent.mkdir(parents=True, exist_ok=True)

        document = {
            "tasks": [
                {
                    "id": task.id,
                    "description": task.description,
                    "status": task.status.value,
                }
                for task in tasks
            ],
            "next_id": next_id,
        }
        # Encode before opening so a failure leaves the old file intact
        content = json.dumps(document, indent=2)

        # Truncate only once the lock is held
        with open(self.file_path, 'a', encoding='utf-8') as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                f.seek(0)
                f.truncate()
                f.write(content)
                f.flush()
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

        logger.debug("Saved %d task(s) to %s", len(tasks), self.file_path)

    def load(self) -> Tuple[List[Task], int]:
        """Load tasks from the JSON file with file locking.

        Returns:
            Tuple of (tasks, next_id). Returns ([], 1) if the file doesn't
            exist or is empty.

        Raises:
            TaskDataError: If the file content is not a valid todo list
            OSError: If the file exists but cannot be read
        """
        if not self.file_path.exists():
            logger.debug("No task file at %s, starting empty", self.file_path)
            return [], 1

        # Read with file locking; decoding happens below so bad bytes
        # become a TaskDataError
        with open(self.file_path, 'rb') as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            try:
                raw = f.read()
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

        try:
            content = raw.decode("utf-8").strip()
            if not content:
                return [], 1

            data = json.loads(content)
            tasks = [
                Task(
                    id=_positive_int(task_data["id"], "id"),
                    description=_string(task_data["description"], "description"),
                    status=Status(task_data["status"]),
                )
                for task_data in data["tasks"]
            ]
            next_id = _positive_int(data["next_id"], "next_id")
            _check_ids(tasks, next_id)
        except (KeyError, TypeError, ValueError, RecursionError) as e:
            # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
            raise TaskDataError(f"Invalid task data in {self.file_path}: {e}") from e

        logger.debug("Loaded %d task(s) from %s", len(tasks), self.file_path)
        return tasks, next_id
