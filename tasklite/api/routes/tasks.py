"""
Task-related API routes.
Thin HTTP layer that delegates to service layer.
"""
import json
import logging
from typing import List, Dict, Any, Optional

from pydantic import ValidationError

from tasklite.adapters.http_framework import HTTPFrameworkAdapter
from tasklite.dependencies.services import get_task_service, get_import_service
from tasklite.models.task_models import TaskCreate, TaskUpdate, TaskResponse
from tasklite.services.task_service import TaskService
from tasklite.services.import_service import ImportService

logger = logging.getLogger(__name__)

# Initialize adapter
http_adapter = HTTPFrameworkAdapter()
HTTPException = http_adapter.HTTPException
Request = http_adapter.Request
Response = http_adapter.Response
Query = http_adapter.Query
Depends = http_adapter.Depends

router = http_adapter.APIRouter(prefix="/tasks", tags=["tasks"])


async def _read_body(request: Request) -> Dict[str, Any]:
    """Parse the JSON body; a missing or non-object body counts as empty."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        logger.warning(f"Ignoring unparseable body on {request.method} {request.url.path}")
        return {}
    return body if isinstance(body, dict) else {}


def _parse(model, body: Dict[str, Any]):
    """Build a request model, converting pydantic errors to a 422."""
    try:
        return model(**body)
    except ValidationError as e:
        errors = [
            {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
            for error in e.errors()
        ]
        raise HTTPException(status_code=422, detail=errors)


@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    search: Optional[str] = Query(None, description="Substring to look for in title or description"),
    task_service: TaskService = Depends(get_task_service)
) -> List[TaskResponse]:
    """List tasks, optionally filtered by a search term."""
    tasks = task_service.list_tasks(search)
    return [TaskResponse(**task) for task in tasks]


# /tasks/import must be registered before the /{task_id} routes
@router.post("/import", status_code=201)
async def import_tasks(import_service: ImportService = Depends(get_import_service)) -> Response:
    """Create tasks from every row of the configured CSV file."""
    created = import_service.import_tasks()
    logger.info(f"Import request created {created} task(s)")
    return Response(status_code=201)


@router.post("", status_code=201)
async def create_task(
    request: Request,
    task_service: TaskService = Depends(get_task_service)
) -> Response:
    """Create a new task."""
    task = _parse(TaskCreate, await _read_body(request))
    task_service.create_task(task.title, task.description)
    return Response(status_code=201)


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    task_service: TaskService = Depends(get_task_service)
) -> TaskResponse:
    """Get a task by ID."""
    return TaskResponse(**task_service.get_task(task_id))


@router.put("/{task_id}", status_code=204)
async def update_task(
    task_id: str,
    request: Request,
    task_service: TaskService = Depends(get_task_service)
) -> Response:
    """Update the title and/or description of a task."""
    changes = _parse(TaskUpdate, await _read_body(request))
    task_service.update_task(task_id, title=changes.title, description=changes.description)
    return Response(status_code=204)


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: str,
    task_service: TaskService = Depends(get_task_service)
) -> Response:
    """Delete a task."""
    task_service.delete_task(task_id)
    return Response(status_code=204)


@router.patch("/{task_id}/complete", status_code=204)
async def toggle_task_complete(
    task_id: str,
    task_service: TaskService = Depends(get_task_service)
) -> Response:
    """Toggle a task between complete and not complete."""
    task_service.toggle_complete(task_id)
    return Response(status_code=204)
