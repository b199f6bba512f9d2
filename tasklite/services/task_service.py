"""
Task service - business logic for task operations.
This layer contains no HTTP framework dependencies.
"""
import uuid
import logging
from typing import Optional, Dict, Any, List
from datetime import datetime, UTC

from tasklite.exceptions.errors import TaskValidationError, TaskNotFoundError
from tasklite.storage.interface import StorageInterface

logger = logging.getLogger(__name__)

TASKS_KIND = "tasks"
REQUIRED_FIELDS_MESSAGE = "title or description are required"


def utc_now(not_before: Optional[str] = None) -> str:
    """
    Current UTC time as an ISO-8601 string.

    If `not_before` is given the result is never earlier than it, so
    updated_at and completed_at cannot precede created_at when the wall
    clock steps backwards.
    """
    now = datetime.now(UTC)
    if not_before:
        floor = datetime.fromisoformat(not_before)
        if floor.tzinfo is None:
            floor = floor.replace(tzinfo=UTC)
        if floor > now:
            now = floor
    return now.isoformat()


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value == ""


class TaskService:
    """Service for task business logic."""

    def __init__(self, storage: StorageInterface):
        """Initialize task service with storage dependency."""
        self.storage = storage

    def create_task(self, title: Optional[str], description: Optional[str]) -> Dict[str, Any]:
        """
        Create a new task.

        Args:
            title: Task title (required, non-empty)
            description: Task description (required, non-empty)

        Returns:
            Created task data as dictionary

        Raises:
            TaskValidationError: If title or description is missing
            PersistenceError: If the snapshot could not be written
        """
        if _is_blank(title) or _is_blank(description):
            raise TaskValidationError(REQUIRED_FIELDS_MESSAGE)

        now = utc_now()
        task = {
            "id": str(uuid.uuid4()),
            "title": title,
            "description": description,
            "completed_at": None,
            "created_at": now,
            "updated_at": now,
        }
        self.storage.insert(TASKS_KIND, task)
        logger.info(f"Created task {task['id']}")
        return task

    def list_tasks(self, search: Optional[str] = None) -> List[Dict[str, Any]]:
        """List tasks whose title or description contains `search`."""
        return self.storage.select(TASKS_KIND, {
            "title": search,
            "description": search,
        })

    def get_task(self, task_id: str) -> Dict[str, Any]:
        """Get a task by ID."""
        task = self.storage.get(TASKS_KIND, task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def update_task(
        self,
        task_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Update the title and/or description of a task.

        Fields that are not supplied keep their current value. The body is
        validated before the task is looked up.

        Raises:
            TaskValidationError: If neither field is supplied
            TaskNotFoundError: If the task does not exist
        """
        if _is_blank(title) and _is_blank(description):
            raise TaskValidationError(REQUIRED_FIELDS_MESSAGE)

        task = self.get_task(task_id)

        fields: Dict[str, Any] = {}
        if not _is_blank(title):
            fields["title"] = title
        if not _is_blank(description):
            fields["description"] = description
        fields["updated_at"] = utc_now(not_before=task["updated_at"])

        updated = self.storage.update(TASKS_KIND, task_id, fields)
        logger.info(f"Updated task {task_id}: {sorted(k for k in fields if k != 'updated_at')}")
        return updated

    def delete_task(self, task_id: str) -> None:
        """Delete a task by ID."""
        self.get_task(task_id)
        self.storage.delete(TASKS_KIND, task_id)
        logger.info(f"Deleted task {task_id}")

    def toggle_complete(self, task_id: str) -> Dict[str, Any]:
        """Mark a task complete, or back to not complete if it already is."""
        task = self.get_task(task_id)

        now = utc_now(not_before=task["updated_at"])
        completed_at = None if task["completed_at"] else now
        updated = self.storage.update(TASKS_KIND, task_id, {
            "completed_at": completed_at,
            "updated_at": now,
        })
        logger.info(f"Task {task_id} marked {'complete' if completed_at else 'not complete'}")
        return updated
