"""
Application factory - creates and configures the FastAPI application.
This isolates all initialization logic from main.py.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from tasklite.adapters.http_framework import HTTPFrameworkAdapter
from tasklite.api.routes.health import router as health_router
from tasklite.api.routes.tasks import router as tasks_router
from tasklite.dependencies.services import ServiceContainer
from tasklite.exceptions.handlers import setup_exception_handlers
from tasklite.middleware.logging_setup import setup_logging
from tasklite.middleware.setup import setup_middleware

http_adapter = HTTPFrameworkAdapter()


@asynccontextmanager
async def lifespan(app):
    """Log application startup and shutdown."""
    logger = logging.getLogger(__name__)
    services = app.state.services
    logger.info(
        "Application starting up...",
        extra={"tasks": services.storage.count("tasks")}
    )
    yield
    logger.info("Application shutting down...")


def create_app(services: Optional[ServiceContainer] = None, configure_logging: bool = True):
    """
    Create and configure the FastAPI application.

    Args:
        services: Service container to use; built from the environment when omitted
        configure_logging: Install the request-id aware root log handler

    Returns:
        Configured FastAPI app instance ready to run.
    """
    if configure_logging:
        setup_logging()
    logger = logging.getLogger(__name__)

    app = http_adapter.create_app(
        title="Tasklite",
        description="Minimal task management service with CSV import",
        version="0.1.0",
        lifespan=lifespan
    )
    app.state.services = services if services is not None else ServiceContainer()

    setup_middleware(app)
    setup_exception_handlers(app)

    app.include_router(tasks_router)
    app.include_router(health_router)

    logger.info("FastAPI app created and configured")
    return app
