"""
Middleware setup and configuration.
"""
from tasklite.monitoring import MetricsMiddleware


def setup_middleware(app):
    """Set up all middleware for the FastAPI application."""
    # Request ids and metrics for every request
    app.add_middleware(MetricsMiddleware)
