"""Core models for todo-cli.

This module defines the core data structures for the todo list:
- Status: Enum for task completion status
- Task: A dataclass representing a single task
"""

from dataclasses import dataclass
from enum import Enum


class Status(Enum):
    """Task completion status.

    Values are the tags written to the JSON file.
    """

    TODO = "Todo"
    DONE = "Done"


@dataclass
class Task:
    """Task model representing a single unit of work.

    Attributes:
        id: Identifier assigned by the store, unique within it
        description: Free-form task text
        status: Current status of the task (TODO or DONE)
    """

    id: int
    description: str
    status: Status = Status.TODO

    @property
    def is_done(self) -> bool:
        return self.status is Status.DONE

    def mark_done(self) -> None:
        """Set the status to DONE. Calling it again has no further effect."""
        self.status = Status.DONE

    def mark_todo(self) -> None:
        """Set the status back to TODO. Calling it again has no further effect."""
        self.status = Status.TODO
