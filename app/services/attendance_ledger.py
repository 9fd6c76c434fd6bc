"""
Attendance ledger: data access for attendance records.

This is the only module that writes attendance rows. The (user_id, date)
unique constraint is the authority on "one record per user per day"; an
insert that collides with it comes back as an InsertResult with
conflict=True instead of an exception. Check-out is a conditional update
that never overwrites an existing check_out_time.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.attendance import AttendanceRecord, AttendanceStatus, UNIQUE_USER_DATE

_log = logging.getLogger(__name__)

UNIQUE_VIOLATION_PGCODE = "23505"


@dataclass(frozen=True)
class InsertResult:
    """Outcome of a ledger insert: the created record, or a (user, date) conflict."""
    record: Optional[AttendanceRecord] = None
    conflict: bool = False

    @property
    def ok(self) -> bool:
        return self.record is not None


@dataclass(frozen=True)
class CheckOutResult:
    """Outcome of a ledger check-out: the updated record, or conflict when it was already checked out."""
    record: Optional[AttendanceRecord] = None
    conflict: bool = False


def _is_user_date_collision(err: IntegrityError) -> bool:
    orig = getattr(err, "orig", None)
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    if UNIQUE_VIOLATION_PGCODE in (getattr(orig, "pgcode", None), getattr(orig, "sqlstate", None)):
        return True
    msg = str(orig if orig is not None else err).lower()
    return (
        UNIQUE_USER_DATE in msg
        or "unique constraint failed: attendance.user_id, attendance.date" in msg
        or "duplicate entry" in msg
    )


def find_for_day(db: Session, user_id: int, day_key: str) -> Optional[AttendanceRecord]:
    return (
        db.query(AttendanceRecord)
        .filter(
            AttendanceRecord.user_id == user_id,
            AttendanceRecord.date == day_key,
        )
        .first()
    )


def insert(
    db: Session,
    user_id: int,
    day_key: str,
    check_in_time: datetime,
    notes: Optional[str] = None,
    status: AttendanceStatus = AttendanceStatus.PRESENT,
) -> InsertResult:
    """Insert a new record for (user_id, day_key). A unique-constraint collision yields conflict=True."""
    record = AttendanceRecord(
        user_id=user_id,
        date=day_key,
        check_in_time=check_in_time,
        check_out_time=None,
        status=status.value,
        notes=notes,
    )
    db.add(record)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if _is_user_date_collision(e):
            _log.info("attendance insert collided: user_id=%s date=%s", user_id, day_key)
            return InsertResult(conflict=True)
        raise
    db.refresh(record)
    return InsertResult(record=record)


def mark_checked_out(
    db: Session,
    record_id: int,
    check_out_time: datetime,
    notes: Optional[str] = None,
) -> CheckOutResult:
    """
    Set check_out_time on a record that has none yet.

    The update is conditional on check_out_time IS NULL, so a concurrent
    check-out that already landed leaves the row untouched and comes back
    as conflict=True. Notes are replaced only when non-empty.
    """
    values = {AttendanceRecord.check_out_time: check_out_time}
    if notes:
        values[AttendanceRecord.notes] = notes

    updated = (
        db.query(AttendanceRecord)
        .filter(
            AttendanceRecord.id == record_id,
            AttendanceRecord.check_out_time.is_(None),
        )
        .update(values, synchronize_session=False)
    )
    db.commit()

    record = db.get(AttendanceRecord, record_id)
    if record is not None:
        db.refresh(record)
    if updated == 0:
        _log.info("attendance check-out collided: record_id=%s", record_id)
        return CheckOutResult(record=record, conflict=True)
    return CheckOutResult(record=record)


def list_for_user(db: Session, user_id: int, limit: int, offset: int) -> List[AttendanceRecord]:
    """Owner-scoped records, newest day first."""
    return (
        db.query(AttendanceRecord)
        .filter(AttendanceRecord.user_id == user_id)
        .order_by(AttendanceRecord.date.desc(), AttendanceRecord.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )


def count_for_user(db: Session, user_id: int) -> int:
    return (
        db.query(func.count(AttendanceRecord.id))
        .filter(AttendanceRecord.user_id == user_id)
        .scalar()
    ) or 0


def delete_all_for_user(db: Session, user_id: int) -> int:
    deleted = (
        db.query(AttendanceRecord)
        .filter(AttendanceRecord.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted
