"""
Pydantic models for request/response validation.
"""
from .task_models import TaskCreate, TaskUpdate, TaskResponse

__all__ = [
    "TaskCreate",
    "TaskUpdate",
    "TaskResponse",
]
