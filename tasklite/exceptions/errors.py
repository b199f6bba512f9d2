"""
Domain exceptions raised by the storage and service layers.
Mapped to HTTP responses in exceptions/handlers.py.
"""
from typing import Optional


class TaskliteError(Exception):
    """Base class for all tasklite errors."""


class TaskValidationError(TaskliteError):
    """A required task field is missing or empty."""

    def __init__(self, message: str = "title or description are required", line: Optional[int] = None):
        super().__init__(message)
        self.message = message
        # Source line for import failures
        self.line = line


class TaskNotFoundError(TaskliteError):
    """No task exists with the given id."""

    def __init__(self, task_id: str):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class PersistenceError(TaskliteError):
    """The snapshot could not be written to disk."""


class ImportSourceError(TaskliteError):
    """The configured import file could not be opened."""
