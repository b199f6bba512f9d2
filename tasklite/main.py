"""
Tasklite - REST API for task management.

Main entry point. All initialization logic is in app/factory.py.
"""
import os
import logging

import uvicorn

from tasklite.app import create_app

logger = logging.getLogger(__name__)


def main() -> None:
    """Run the service with uvicorn."""
    app = create_app()
    port = int(os.getenv("TASKLITE_PORT", "3333"))

    config = uvicorn.Config(
        app,
        host=os.getenv("TASKLITE_HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "INFO").lower(),
        access_log=True,
        timeout_keep_alive=30,
        timeout_graceful_shutdown=30,
    )
    server = uvicorn.Server(config)

    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    finally:
        logger.info("Service stopped")


if __name__ == "__main__":
    main()
