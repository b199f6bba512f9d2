"""
Service container for dependency injection.
Centralizes service initialization and provides access to all services.

The container is created once per application (see app/factory.py) and kept
on app.state; route dependencies resolve it from the incoming request.
"""
import os
import logging
from typing import Optional

from fastapi import Request

from tasklite.storage.json_storage import JsonFileStorage
from tasklite.services.task_service import TaskService
from tasklite.services.import_service import ImportService

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class ServiceContainer:
    """Container for all application services."""

    def __init__(
        self,
        db_path: Optional[str] = None,
        import_path: Optional[str] = None,
        import_delimiter: Optional[str] = None,
        case_insensitive_search: Optional[bool] = None,
    ):
        # Explicit arguments win over environment
        self.db_path = db_path or os.getenv("TASKLITE_DB_PATH", "db.json")
        self.import_path = import_path or os.getenv("TASKLITE_IMPORT_PATH", "streams/tasks.csv")
        self.import_delimiter = import_delimiter or os.getenv("TASKLITE_IMPORT_DELIMITER", ",")
        if case_insensitive_search is None:
            case_insensitive_search = _env_flag("TASKLITE_SEARCH_CASE_INSENSITIVE")

        self.storage = JsonFileStorage(self.db_path, case_sensitive=not case_insensitive_search)
        self.task_service = TaskService(self.storage)
        self.import_service = ImportService(
            self.task_service,
            self.import_path,
            delimiter=self.import_delimiter,
        )
        logger.info(
            f"Services initialized (snapshot: {self.db_path}, import source: {self.import_path}, "
            f"case-insensitive search: {case_insensitive_search})"
        )


def get_services(request: Request) -> ServiceContainer:
    """Get the service container attached to the running app."""
    return request.app.state.services


def get_task_service(request: Request) -> TaskService:
    """Get the task service instance."""
    return get_services(request).task_service


def get_import_service(request: Request) -> ImportService:
    """Get the import service instance."""
    return get_services(request).import_service
