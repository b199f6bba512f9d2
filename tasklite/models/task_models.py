"""
Pydantic models for task-related requests and responses.

Request fields are optional at the model level so that a missing title or
description reaches the service layer and produces the 400 validation message
instead of a framework 422.
"""
from typing import Optional
from pydantic import BaseModel, Field


class TaskCreate(BaseModel):
    """Request model for creating a task."""
    title: Optional[str] = Field(None, description="Task title")
    description: Optional[str] = Field(None, description="Detailed task description")


class TaskUpdate(BaseModel):
    """Request model for updating a task. Only supplied fields change."""
    title: Optional[str] = Field(None, description="New task title")
    description: Optional[str] = Field(None, description="New task description")


class TaskResponse(BaseModel):
    """Task response model."""
    id: str
    title: str
    description: str
    completed_at: Optional[str]
    created_at: str
    updated_at: str
