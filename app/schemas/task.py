"""
Task schemas
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_serializer

from app.models.task import TaskPriority, TaskStatus
from app.schemas.attendance import PaginationOut
from app.utils.datetime_utils import iso_8601_utc


class TaskCreate(BaseModel):
    """Schema for creating a task"""
    title: str = Field(..., min_length=1, max_length=255, description="Title")
    description: Optional[str] = Field(None, description="Description")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="low / medium / high")
    due_date: Optional[datetime] = Field(None, description="Due date (ISO-8601)")


class TaskUpdate(BaseModel):
    """Schema for updating a task; only provided fields change"""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = Field(None, description="Due date; null clears it")


class TaskOut(BaseModel):
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("due_date", "completed_at", "created_at", "updated_at")
    def _ser_datetime(self, dt: Optional[datetime]) -> Optional[str]:
        return iso_8601_utc(dt)


class TaskListOut(BaseModel):
    tasks: List[TaskOut]
    pagination: PaginationOut


class MessageOut(BaseModel):
    message: str
