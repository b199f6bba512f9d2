"""
Exception handlers for the application.
"""
import logging
from typing import Any, Dict

from tasklite.adapters.http_framework import HTTPFrameworkAdapter
from tasklite.exceptions.errors import (
    TaskValidationError,
    TaskNotFoundError,
    PersistenceError,
    ImportSourceError,
)
from tasklite.monitoring import get_request_id

# Initialize adapter
http_adapter = HTTPFrameworkAdapter()
Request = http_adapter.Request
JSONResponse = http_adapter.JSONResponse
Response = http_adapter.Response
RequestValidationError = http_adapter.RequestValidationError

logger = logging.getLogger(__name__)


def _error_response(request: Request, status_code: int, error: str, detail: Any, **extra: Any) -> JSONResponse:
    """Build the standard error envelope used for 422/500 responses."""
    request_id = get_request_id() or '-'
    content: Dict[str, Any] = {
        "error": error,
        "detail": detail,
        **extra,
        "path": request.url.path,
        "method": request.method,
        "request_id": request_id
    }
    response = JSONResponse(status_code=status_code, content=content)
    if request_id != '-':
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Trace-ID"] = request_id
    return response


async def task_validation_exception_handler(request: Request, exc: TaskValidationError) -> JSONResponse:
    """Missing title or description -> 400 with a message body."""
    logger.warning(
        f"Validation failed in {request.method} {request.url.path}: {exc.message}",
        extra={"request_id": get_request_id() or '-', "line": exc.line}
    )
    return JSONResponse(status_code=400, content={"message": exc.message})


async def task_not_found_exception_handler(request: Request, exc: TaskNotFoundError) -> Response:
    """Unknown task id -> 404 with an empty body."""
    logger.info(f"{request.method} {request.url.path}: task {exc.task_id} not found")
    return Response(status_code=404)


async def persistence_exception_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    """Snapshot write failures -> 500."""
    logger.error(
        f"Storage error in {request.method} {request.url.path}: {exc}",
        extra={"request_id": get_request_id() or '-', "exception_type": type(exc).__name__}
    )
    return _error_response(
        request, 500, "Storage error",
        "The change could not be saved. Please try again or contact support if the issue persists."
    )


async def import_source_exception_handler(request: Request, exc: ImportSourceError) -> JSONResponse:
    """Import file missing or unreadable -> 500."""
    logger.error(f"Import source error in {request.method} {request.url.path}: {exc}")
    return _error_response(request, 500, "Import source unavailable", str(exc))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle request validation errors with clear messages.
    """
    errors = []
    for error in exc.errors():
        field = " -> ".join(str(loc) for loc in error["loc"])
        errors.append(f"{field}: {error['msg']}")

    logger.warning(f"Validation error in {request.method} {request.url.path}: {', '.join(errors)}")
    return _error_response(
        request, 422, "Validation error", "One or more fields failed validation", errors=errors
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler for unhandled exceptions.
    """
    logger.error(
        f"Unhandled exception in {request.method} {request.url.path}: {str(exc)}",
        exc_info=exc,
        extra={
            "request_id": get_request_id() or '-',
            "exception_type": type(exc).__name__,
        }
    )
    return _error_response(
        request, 500, "Internal server error",
        "An unexpected error occurred. Please try again or contact support if the issue persists."
    )


def setup_exception_handlers(app):
    """
    Register exception handlers with the FastAPI app.
    """
    app.add_exception_handler(TaskValidationError, task_validation_exception_handler)
    app.add_exception_handler(TaskNotFoundError, task_not_found_exception_handler)
    app.add_exception_handler(PersistenceError, persistence_exception_handler)
    app.add_exception_handler(ImportSourceError, import_source_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
