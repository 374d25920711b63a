"""In-memory todo list backed by a storage implementation.

TaskStore owns the ordered list of tasks and the id counter. Mutations only
touch memory; callers persist explicitly with save().
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from todo_cli.models import Status, Task
from todo_cli.storage import JsonStorage, Storage

logger = logging.getLogger(__name__)


@dataclass
class TaskStore:
    """The todo list: tasks in insertion order plus the next id to assign.

    next_id is persisted rather than derived from the existing ids, so the
    id of a removed task is never handed out again.

    Attributes:
        tasks: Tasks in insertion order
        next_id: Identifier the next added task will receive
        storage: Storage backend used by load() and save()
    """

    tasks: List[Task] = field(default_factory=list)
    next_id: int = 1
    storage: Storage = field(default_factory=JsonStorage, compare=False, repr=False)

    @classmethod
    def load(cls, storage: Optional[Storage] = None) -> "TaskStore":
        """Build a store from persisted state.

        Args:
            storage: Storage implementation to use. If None, uses JsonStorage
                    with the default file path.

        Returns:
            The loaded store, or an empty one if nothing was persisted yet

        Raises:
            TaskDataError: If persisted state exists but cannot be parsed
        """
        storage = storage or JsonStorage()
        tasks, next_id = storage.load()
        return cls(tasks=tasks, next_id=next_id, storage=storage)

    def save(self) -> None:
        """Persist all tasks and the id counter, overwriting previous state."""
        self.storage.save(self.tasks, self.next_id)

    def add_task(self, description: str) -> int:
        """Append a new TODO task.

        Args:
            description: Task text, stored as given

        Returns:
            The id assigned to the new task
        """
        task_id = self.next_id
        self.tasks.append(Task(id=task_id, description=description))
        self.next_id += 1
        logger.debug("Added task #%d", task_id)
        return task_id

    def get_task(self, task_id: int) -> Optional[Task]:
        """Return the task with the given id, or None if absent."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def mark_done(self, task_id: int) -> bool:
        """Mark a task as done.

        Returns:
            True if the task exists, False otherwise
        """
        task = self.get_task(task_id)
        if task is None:
            return False
        task.mark_done()
        logger.debug("Marked task #%d as done", task_id)
        return True

    def mark_todo(self, task_id: int) -> bool:
        """Mark a task as todo again.

        Returns:
            True if the task exists, False otherwise
        """
        task = self.get_task(task_id)
        if task is None:
            return False
        task.mark_todo()
        logger.debug("Marked task #%d as todo", task_id)
        return True

    def remove_task(self, task_id: int) -> bool:
        """Remove a task, keeping the order of the rest.

        Returns:
            True if the task was removed, False if it didn't exist
        """
        for index, task in enumerate(self.tasks):
            if task.id == task_id:
                del self.tasks[index]
                logger.debug("Removed task #%d", task_id)
                return True
        return False

    def clear_done(self) -> int:
        """Remove every DONE task.

        Returns:
            Number of tasks removed
        """
        initial_count = len(self.tasks)
        self.tasks = [task for task in self.tasks if task.status == Status.TODO]
        removed = initial_count - len(self.tasks)
        logger.debug("Cleared %d completed task(s)", removed)
        return removed

    def list_all(self) -> List[Task]:
        return list(self.tasks)

    def list_todo(self) -> List[Task]:
        return [task for task in self.tasks if task.status == Status.TODO]

    def list_done(self) -> List[Task]:
        return [task for task in self.tasks if task.status == Status.DONE]
