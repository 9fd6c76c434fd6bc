"""
Database models
"""
from app.models.user import User, UserRole
from app.models.attendance import AttendanceRecord, AttendanceStatus
from app.models.task import Task, TaskStatus, TaskPriority

__all__ = [
    "User",
    "UserRole",
    "AttendanceRecord",
    "AttendanceStatus",
    "Task",
    "TaskStatus",
    "TaskPriority",
]
