"""
Health and metrics routes.
"""
from prometheus_client import CONTENT_TYPE_LATEST

from tasklite.adapters.http_framework import HTTPFrameworkAdapter
from tasklite.dependencies.services import ServiceContainer, get_services
from tasklite.monitoring import get_health_info, get_metrics

http_adapter = HTTPFrameworkAdapter()
JSONResponse = http_adapter.JSONResponse
Response = http_adapter.Response
Depends = http_adapter.Depends

router = http_adapter.APIRouter(tags=["health"])


@router.get("/health")
async def health_check(services: ServiceContainer = Depends(get_services)):
    """Health check endpoint with service and storage status."""
    health_info = get_health_info(services.storage)
    if health_info.get("status") == "unhealthy":
        return JSONResponse(content=health_info, status_code=503)
    return health_info


@router.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(content=get_metrics(), media_type=CONTENT_TYPE_LATEST)
