"""
Task endpoints (owner-scoped CRUD)
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.deps import get_db, get_current_identity
from app.core.security import TokenClaims
from app.models.task import TaskPriority, TaskStatus
from app.schemas.attendance import PaginationOut
from app.schemas.task import MessageOut, TaskCreate, TaskListOut, TaskOut, TaskUpdate
from app.services import task_service
from app.utils.pagination import parse_pagination

router = APIRouter()

TASKS_DEFAULT_LIMIT = 50
TASKS_MAX_LIMIT = 100


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
async def create_task_endpoint(
    body: TaskCreate,
    db: Session = Depends(get_db),
    identity: TokenClaims = Depends(get_current_identity),
):
    """Create a task for the current user (status starts as pending)"""
    task = task_service.create_task(
        db,
        identity.user_id,
        title=body.title,
        description=body.description,
        priority=body.priority,
        due_date=body.due_date,
    )
    return TaskOut.model_validate(task)


@router.get("", response_model=TaskListOut)
async def list_tasks_endpoint(
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    priority: Optional[TaskPriority] = Query(None),
    limit: Optional[str] = Query(None, description="Page size (default 50, max 100)"),
    offset: Optional[str] = Query(None, description="Tasks to skip (default 0)"),
    db: Session = Depends(get_db),
    identity: TokenClaims = Depends(get_current_identity),
):
    """List the current user's tasks, optionally filtered by status and priority"""
    page_limit, page_offset = parse_pagination(
        limit, offset, default_limit=TASKS_DEFAULT_LIMIT, max_limit=TASKS_MAX_LIMIT,
    )
    page = task_service.list_tasks(
        db,
        identity.user_id,
        status=status_filter,
        priority=priority,
        limit=page_limit,
        offset=page_offset,
    )
    return TaskListOut(
        tasks=[TaskOut.model_validate(t) for t in page.tasks],
        pagination=PaginationOut(total=page.total, limit=page.limit, offset=page.offset),
    )


@router.get("/{task_id}", response_model=TaskOut)
async def get_task_endpoint(
    task_id: int,
    db: Session = Depends(get_db),
    identity: TokenClaims = Depends(get_current_identity),
):
    """Get one of the current user's tasks; 404 if missing or owned by someone else"""
    return TaskOut.model_validate(task_service.get_task(db, identity.user_id, task_id))


@router.put("/{task_id}", response_model=TaskOut)
async def update_task_endpoint(
    task_id: int,
    body: TaskUpdate,
    db: Session = Depends(get_db),
    identity: TokenClaims = Depends(get_current_identity),
):
    """Partially update a task. Moving into 'completed' stamps completed_at; moving out clears it."""
    task = task_service.update_task(
        db,
        identity.user_id,
        task_id,
        body.model_dump(exclude_unset=True),
    )
    return TaskOut.model_validate(task)


@router.delete("/{task_id}", response_model=MessageOut)
async def delete_task_endpoint(
    task_id: int,
    db: Session = Depends(get_db),
    identity: TokenClaims = Depends(get_current_identity),
):
    """Delete a task; 404 if missing or owned by someone else"""
    task_service.delete_task(db, identity.user_id, task_id)
    return MessageOut(message="Task deleted successfully")
