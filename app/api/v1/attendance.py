"""
Attendance endpoints: check-in/check-out for the caller's current local day.
All routes act on the authenticated user's own records only.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.deps import get_db, get_current_identity, get_settings
from app.core.exceptions import NotFound
from app.core.security import TokenClaims
from app.schemas.attendance import (
    AttendanceHistoryOut,
    AttendanceOut,
    CheckInRequest,
    CheckOutRequest,
    CleanupOut,
    PaginationOut,
    TodayStatusOut,
)
from app.services import attendance_service
from app.utils.cache_headers import apply_no_store, apply_private_cache
from app.utils.pagination import parse_pagination

router = APIRouter()
_log = logging.getLogger(__name__)

HISTORY_DEFAULT_LIMIT = 30
HISTORY_MAX_LIMIT = 100


@router.post("/checkin", response_model=AttendanceOut, status_code=status.HTTP_201_CREATED)
async def checkin_endpoint(
    response: Response,
    body: Optional[CheckInRequest] = None,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    identity: TokenClaims = Depends(get_current_identity),
):
    """
    Check in for today (server local date).
    400 "You have already checked in today" if a record for today exists.
    """
    payload = body or CheckInRequest()
    record = attendance_service.check_in(
        db,
        identity.user_id,
        notes=payload.notes,
        tz=settings.local_timezone(),
    )
    apply_no_store(response)
    return AttendanceOut.model_validate(record)


@router.post("/checkout", response_model=AttendanceOut)
async def checkout_endpoint(
    response: Response,
    body: Optional[CheckOutRequest] = None,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    identity: TokenClaims = Depends(get_current_identity),
):
    """
    Check out for today.
    404 when there is no check-in today, 400 when already checked out.
    """
    payload = body or CheckOutRequest()
    record = attendance_service.check_out(
        db,
        identity.user_id,
        notes=payload.notes,
        tz=settings.local_timezone(),
    )
    apply_no_store(response)
    return AttendanceOut.model_validate(record)


@router.get("/today", response_model=TodayStatusOut)
async def today_endpoint(
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    identity: TokenClaims = Depends(get_current_identity),
):
    """Today's record (or null), whether the caller has checked in, and the day key used."""
    today = attendance_service.get_today_status(db, identity.user_id, tz=settings.local_timezone())
    apply_no_store(response, with_etag=True)
    return TodayStatusOut(
        attendance=AttendanceOut.model_validate(today.attendance) if today.attendance else None,
        has_checked_in=today.has_checked_in,
        date=today.date,
    )


@router.get("/history", response_model=AttendanceHistoryOut)
async def history_endpoint(
    response: Response,
    limit: Optional[str] = Query(None, description="Page size (default 30, max 100)"),
    offset: Optional[str] = Query(None, description="Records to skip (default 0)"),
    db: Session = Depends(get_db),
    identity: TokenClaims = Depends(get_current_identity),
):
    """Caller's records, newest date first, with the total count."""
    page_limit, page_offset = parse_pagination(
        limit, offset, default_limit=HISTORY_DEFAULT_LIMIT, max_limit=HISTORY_MAX_LIMIT,
    )
    page = attendance_service.get_history(db, identity.user_id, limit=page_limit, offset=page_offset)
    _log.debug(
        "history: user_id=%s limit=%s offset=%s returned=%s total=%s",
        identity.user_id, page.limit, page.offset, len(page.records), page.total,
    )
    apply_private_cache(response)
    return AttendanceHistoryOut(
        attendance=[AttendanceOut.model_validate(r) for r in page.records],
        pagination=PaginationOut(total=page.total, limit=page.limit, offset=page.offset),
    )


@router.delete("/cleanup", response_model=CleanupOut)
async def cleanup_endpoint(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    identity: TokenClaims = Depends(get_current_identity),
):
    """
    Delete all of the caller's attendance records.
    Only available when ATTENDANCE_CLEANUP_ENABLED is set; 404 otherwise.
    """
    if not settings.ATTENDANCE_CLEANUP_ENABLED:
        raise NotFound()
    deleted = attendance_service.cleanup(db, identity.user_id)
    return CleanupOut(message=f"Deleted {deleted} attendance records", deleted_count=deleted)
