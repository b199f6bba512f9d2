"""
Service layer for business logic.
Services contain pure business logic without HTTP framework dependencies.
"""

from tasklite.services.task_service import TaskService
from tasklite.services.import_service import ImportService

__all__ = ["TaskService", "ImportService"]
