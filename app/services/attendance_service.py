"""
Attendance service: check-in / check-out per local calendar day.

Per user and day key the record moves NOT_CHECKED_IN -> CHECKED_IN -> CHECKED_OUT.
The day key is the server's local date (see app.utils.datetime_utils.local_date_key).
Duplicate check-ins are rejected by a cheap pre-check; the ledger's unique
constraint settles concurrent attempts, and both paths end in AlreadyCheckedIn.
Check-out follows the same shape: the ledger only sets check_out_time while it
is still empty, and a lost update ends in AlreadyCheckedOut.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import AlreadyCheckedIn, AlreadyCheckedOut, NoCheckInFound
from app.models.attendance import AttendanceRecord
from app.services import attendance_ledger as ledger
from app.utils.datetime_utils import ensure_utc, now_utc, local_date_key

_log = logging.getLogger(__name__)


@dataclass
class TodayStatus:
    date: str
    attendance: Optional[AttendanceRecord]

    @property
    def has_checked_in(self) -> bool:
        return self.attendance is not None


@dataclass
class HistoryPage:
    records: List[AttendanceRecord]
    total: int
    limit: int
    offset: int


def check_in(
    db: Session,
    user_id: int,
    notes: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> AttendanceRecord:
    """
    Check in for today. Raises AlreadyCheckedIn if a record for (user, today) exists,
    including when a concurrent request won the insert.
    """
    now = ensure_utc(now) if now else now_utc()
    today = local_date_key(now, tz)

    if ledger.find_for_day(db, user_id, today) is not None:
        _log.info("check-in rejected, already checked in: user_id=%s date=%s", user_id, today)
        raise AlreadyCheckedIn()

    result = ledger.insert(db, user_id, today, check_in_time=now, notes=notes or None)
    if result.conflict:
        _log.info("check-in lost a concurrent insert: user_id=%s date=%s", user_id, today)
        raise AlreadyCheckedIn()

    _log.info("check-in: user_id=%s date=%s record_id=%s", user_id, today, result.record.id)
    return result.record


def check_out(
    db: Session,
    user_id: int,
    notes: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> AttendanceRecord:
    """
    Check out for today: set check_out_time once. Notes are overwritten only
    when a non-empty value is given.
    """
    now = ensure_utc(now) if now else now_utc()
    today = local_date_key(now, tz)

    record = ledger.find_for_day(db, user_id, today)
    if record is None:
        _log.info("check-out rejected, no check-in: user_id=%s date=%s", user_id, today)
        raise NoCheckInFound()
    if record.check_out_time is not None:
        _log.info("check-out rejected, already checked out: user_id=%s date=%s", user_id, today)
        raise AlreadyCheckedOut()

    result = ledger.mark_checked_out(db, record.id, check_out_time=now, notes=notes or None)
    if result.conflict:
        _log.info("check-out lost a concurrent update: user_id=%s date=%s", user_id, today)
        raise AlreadyCheckedOut()
    record = result.record

    _log.info("check-out: user_id=%s date=%s record_id=%s", user_id, today, record.id)
    return record


def get_today_status(
    db: Session,
    user_id: int,
    *,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> TodayStatus:
    today = local_date_key(now, tz)
    return TodayStatus(date=today, attendance=ledger.find_for_day(db, user_id, today))


def get_history(db: Session, user_id: int, limit: int, offset: int) -> HistoryPage:
    """Owner's records, date descending, with the total owner-scoped count."""
    return HistoryPage(
        records=ledger.list_for_user(db, user_id, limit=limit, offset=offset),
        total=ledger.count_for_user(db, user_id),
        limit=limit,
        offset=offset,
    )


def cleanup(db: Session, user_id: int) -> int:
    """Delete every attendance record owned by user_id. Admin/test utility."""
    deleted = ledger.delete_all_for_user(db, user_id)
    _log.warning("attendance cleanup: user_id=%s deleted=%s", user_id, deleted)
    return deleted
