"""
Attendance schemas
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field, field_serializer

from app.utils.datetime_utils import iso_8601_utc


class CheckInRequest(BaseModel):
    """Body for POST /attendance/checkin (optional)"""
    notes: Optional[str] = Field(None, max_length=2000, description="Free-text notes")


class CheckOutRequest(BaseModel):
    """Body for POST /attendance/checkout (optional). Non-empty notes replace existing notes."""
    notes: Optional[str] = Field(None, max_length=2000, description="Free-text notes")


class AttendanceOut(BaseModel):
    """Attendance record. Datetimes are ISO-8601 UTC (Z)."""
    id: int
    user_id: int
    date: str
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("check_in_time", "check_out_time", "created_at", "updated_at")
    def _ser_datetime(self, dt: Optional[datetime]) -> Optional[str]:
        return iso_8601_utc(dt)


class TodayStatusOut(BaseModel):
    attendance: Optional[AttendanceOut] = None
    has_checked_in: bool = Field(..., alias="hasCheckedIn")
    date: str = Field(..., description="Day key (server local date) the status refers to")

    model_config = ConfigDict(populate_by_name=True)


class PaginationOut(BaseModel):
    total: int
    limit: int
    offset: int


class AttendanceHistoryOut(BaseModel):
    attendance: List[AttendanceOut]
    pagination: PaginationOut


class CleanupOut(BaseModel):
    message: str
    deleted_count: int = Field(..., alias="deletedCount")

    model_config = ConfigDict(populate_by_name=True)
