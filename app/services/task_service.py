"""
Task service - owner-scoped CRUD for personal tasks
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import case
from sqlalchemy.orm import Session

from app.core.exceptions import TaskNotFound
from app.models.task import Task, TaskPriority, TaskStatus
from app.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)

STATUS_ORDER = {
    TaskStatus.PENDING.value: 1,
    TaskStatus.IN_PROGRESS.value: 2,
    TaskStatus.COMPLETED.value: 3,
    TaskStatus.CANCELLED.value: 4,
}
PRIORITY_ORDER = {
    TaskPriority.HIGH.value: 1,
    TaskPriority.MEDIUM.value: 2,
    TaskPriority.LOW.value: 3,
}

UPDATABLE_FIELDS = ("title", "description", "status", "priority", "due_date")


@dataclass
class TaskPage:
    tasks: List[Task]
    total: int
    limit: int
    offset: int


def _enum_value(v: Any) -> Any:
    return v.value if hasattr(v, "value") else v


def create_task(
    db: Session,
    user_id: int,
    title: str,
    description: Optional[str] = None,
    priority: TaskPriority = TaskPriority.MEDIUM,
    due_date: Optional[datetime] = None,
) -> Task:
    task = Task(
        user_id=user_id,
        title=title,
        description=description or None,
        priority=_enum_value(priority),
        due_date=due_date,
        status=TaskStatus.PENDING.value,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("Task created: id=%s user_id=%s", task.id, user_id)
    return task


def list_tasks(
    db: Session,
    user_id: int,
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
    limit: int = 50,
    offset: int = 0,
) -> TaskPage:
    """
    List the owner's tasks.

    Order: status (pending, in_progress, completed, cancelled), priority
    (high first), due_date ascending with nulls last, newest first.
    """
    query = db.query(Task).filter(Task.user_id == user_id)
    if status is not None:
        query = query.filter(Task.status == _enum_value(status))
    if priority is not None:
        query = query.filter(Task.priority == _enum_value(priority))

    total = query.count()
    tasks = (
        query.order_by(
            case(STATUS_ORDER, value=Task.status, else_=len(STATUS_ORDER) + 1),
            case(PRIORITY_ORDER, value=Task.priority, else_=len(PRIORITY_ORDER) + 1),
            case((Task.due_date.is_(None), 1), else_=0),
            Task.due_date.asc(),
            Task.created_at.desc(),
            Task.id.desc(),
        )
        .offset(offset)
        .limit(limit)
        .all()
    )
    return TaskPage(tasks=tasks, total=total, limit=limit, offset=offset)


def get_task(db: Session, user_id: int, task_id: int) -> Task:
    """Fetch a task owned by user_id. Tasks of other users are reported as missing."""
    task = (
        db.query(Task)
        .filter(Task.id == task_id, Task.user_id == user_id)
        .first()
    )
    if not task:
        raise TaskNotFound()
    return task


def update_task(db: Session, user_id: int, task_id: int, changes: Dict[str, Any]) -> Task:
    """
    Apply a partial update. completed_at is set when the status moves into
    'completed' and cleared when it moves to anything else.
    """
    task = get_task(db, user_id, task_id)

    for field in UPDATABLE_FIELDS:
        if field not in changes or field == "status":
            continue
        value = _enum_value(changes[field])
        if field in ("title", "priority") and value is None:
            continue
        setattr(task, field, value)

    if changes.get("status") is not None:
        old_status = task.status
        new_status = _enum_value(changes["status"])
        task.status = new_status
        if new_status == TaskStatus.COMPLETED.value and old_status != TaskStatus.COMPLETED.value:
            task.completed_at = now_utc()
        elif new_status != TaskStatus.COMPLETED.value:
            task.completed_at = None

    db.commit()
    db.refresh(task)
    return task


def delete_task(db: Session, user_id: int, task_id: int) -> None:
    deleted = (
        db.query(Task)
        .filter(Task.id == task_id, Task.user_id == user_id)
        .delete(synchronize_session=False)
    )
    if deleted == 0:
        raise TaskNotFound()
    db.commit()
    logger.info("Task deleted: id=%s user_id=%s", task_id, user_id)
