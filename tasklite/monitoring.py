"""
Monitoring and observability utilities for the task service.

Provides:
- Prometheus metrics (requests, latencies, errors)
- Request tracing (unique request IDs)
- Health information including a storage check
"""
import os
import re
import time
import uuid
import logging
from typing import Callable, Dict, Any
from contextvars import ContextVar

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware
from prometheus_client import Counter, Histogram, Gauge, generate_latest

# Request context variable for tracing
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

# Prometheus metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint', 'status_code'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
)

http_errors_total = Counter(
    'http_errors_total',
    'Total number of HTTP errors',
    ['method', 'endpoint', 'status_code', 'error_type']
)

service_uptime_seconds = Gauge(
    'service_uptime_seconds',
    'Service uptime in seconds'
)

service_start_time = time.time()

logger = logging.getLogger(__name__)

_UUID_RE = re.compile(r'[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}', re.IGNORECASE)
# Any segment after /tasks/ except the import route
_TASK_ID_RE = re.compile(r'^/tasks/(?!import(?:/|$))[^/]+')


def get_request_id() -> str:
    """Get the current request ID from context."""
    return request_id_var.get('')


def set_request_id(request_id: str) -> None:
    """Set the request ID in context."""
    request_id_var.set(request_id)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware for collecting Prometheus metrics and request tracing."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        set_request_id(request_id)

        endpoint = self._get_endpoint_path(request.url.path)
        start_time = time.time()
        service_uptime_seconds.set(time.time() - service_start_time)

        logger.info(
            "Request started",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "endpoint": endpoint,
                "client_ip": request.client.host if request.client else None,
            }
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
            logger.error(
                "Request failed with exception",
                exc_info=True,
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "endpoint": endpoint,
                    "status_code": status_code,
                    "duration_seconds": duration,
                    "exception_type": type(e).__name__,
                }
            )
            http_errors_total.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=status_code,
                error_type="exception"
            ).inc()
            raise

        status_code = response.status_code
        duration = time.time() - start_time
        logger.info(
            "Request completed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "endpoint": endpoint,
                "status_code": status_code,
                "duration_seconds": duration,
            }
        )

        http_requests_total.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=status_code
        ).inc()
        http_request_duration_seconds.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=status_code
        ).observe(duration)

        if status_code >= 400:
            error_type = "client_error" if status_code < 500 else "server_error"
            http_errors_total.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=status_code,
                error_type=error_type
            ).inc()

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Trace-ID"] = request_id
        return response

    @staticmethod
    def _get_endpoint_path(path: str) -> str:
        """Normalize endpoint path for metrics (replace task ids)."""
        path = _UUID_RE.sub('{id}', path)
        path = _TASK_ID_RE.sub('/tasks/{id}', path)
        if len(path) > 100:
            path = path[:100]
        return path


def get_metrics() -> str:
    """Get Prometheus metrics in text format."""
    return generate_latest().decode('utf-8')


def check_storage_health(storage) -> Dict[str, Any]:
    """
    Check that the snapshot location is usable.

    Args:
        storage: JsonFileStorage instance

    Returns:
        Dictionary with storage health status
    """
    directory = storage.db_path.parent
    writable = os.path.isdir(directory) and os.access(directory, os.W_OK)

    result = {
        "status": "healthy" if writable else "unhealthy",
        "snapshot_path": str(storage.db_path),
        "snapshot_exists": storage.db_path.exists(),
        "writable": writable,
        "tables": {kind: storage.count(kind) for kind in storage.kinds()},
    }
    if not writable:
        logger.warning(f"Snapshot directory {directory} is not writable")
    return result


def get_health_info(storage=None) -> Dict[str, Any]:
    """
    Get health information including uptime and component status.

    Args:
        storage: Optional storage instance for a storage health check
    """
    uptime = time.time() - service_start_time
    components = {
        "service": {
            "status": "healthy",
            "uptime_seconds": uptime,
            "uptime_formatted": _format_uptime(uptime)
        }
    }
    overall_status = "healthy"

    if storage is not None:
        storage_health = check_storage_health(storage)
        components["storage"] = storage_health
        if storage_health["status"] == "unhealthy":
            overall_status = "unhealthy"

    return {
        "status": overall_status,
        "service": "tasklite",
        "timestamp": time.time(),
        "uptime_seconds": uptime,
        "uptime_formatted": _format_uptime(uptime),
        "components": components
    }


def _format_uptime(seconds: float) -> str:
    """Format uptime in human-readable format."""
    days = int(seconds // 86400)
    hours = int((seconds % 86400) // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    if days > 0:
        return f"{days}d {hours}h {minutes}m {secs}s"
    elif hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    elif minutes > 0:
        return f"{minutes}m {secs}s"
    else:
        return f"{secs}s"
