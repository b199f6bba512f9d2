"""
Exception types and HTTP exception handlers.
"""
from tasklite.exceptions.errors import (
    TaskliteError,
    TaskValidationError,
    TaskNotFoundError,
    PersistenceError,
    ImportSourceError,
)

__all__ = [
    "TaskliteError",
    "TaskValidationError",
    "TaskNotFoundError",
    "PersistenceError",
    "ImportSourceError",
]
