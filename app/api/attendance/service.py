"""Attendance service: filtered listing, per-day upsert and aggregate statistics."""

import logging
from datetime import date
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.dates import current_month_bounds, days_in_month, month_bounds, to_calendar_day
from app.core.enums import AttendanceStatus, EmployeeStatus
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.models import Attendance, Employee

from .schemas import AttendanceMark, AttendanceStats, AttendanceUpdate, MonthStats

logger = logging.getLogger(__name__)

# Response keys for the per-status counters
STATUS_KEYS: Dict[AttendanceStatus, str] = {
    AttendanceStatus.PRESENT: "present",
    AttendanceStatus.ABSENT: "absent",
    AttendanceStatus.LATE: "late",
    AttendanceStatus.WFH: "wfh",
}

OPTIONAL_FIELDS = ("check_in_time", "check_out_time", "location", "notes")

MIN_YEAR, MAX_YEAR = 2000, 2100


def _count_by_status(statuses) -> Dict[str, int]:
    counts = {key: 0 for key in STATUS_KEYS.values()}
    for status, n in statuses:
        counts[STATUS_KEYS[AttendanceStatus(status)]] += n
    return counts


def _validate_month_year(month: Optional[int], year: Optional[int]) -> None:
    if month is None or year is None:
        raise ValidationError("Month and year are required")
    errors = []
    if not 1 <= month <= 12:
        errors.append({"field": "month", "message": "Month must be between 1 and 12"})
    if not MIN_YEAR <= year <= MAX_YEAR:
        errors.append({"field": "year", "message": "Year must be valid"})
    if errors:
        raise ValidationError("Validation failed", errors)


async def _load(db: AsyncSession, attendance_id: UUID) -> Optional[Attendance]:
    """Fetch one record with its employee, overwriting any stale copy in the session."""
    stmt = (
        select(Attendance)
        .options(selectinload(Attendance.employee))
        .where(Attendance.id == attendance_id)
        .execution_options(populate_existing=True)
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def _require_employee(db: AsyncSession, employee_id: UUID) -> Employee:
    employee = await db.get(Employee, employee_id)
    if not employee:
        raise NotFoundError("Employee not found")
    return employee


async def find_for_day(db: AsyncSession, employee_id: UUID, day: date) -> Optional[Attendance]:
    result = await db.execute(
        select(Attendance).where(Attendance.employee_id == employee_id, Attendance.date == day)
    )
    return result.scalar_one_or_none()


async def list_attendance(
    db: AsyncSession,
    *,
    employee_id: Optional[UUID] = None,
    status: Optional[AttendanceStatus] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    page: int = 1,
    limit: int = 50,
) -> Tuple[List[Attendance], int]:
    """Page of records (newest day first) and total count. month+year override start/end."""
    conditions = []
    if employee_id is not None:
        conditions.append(Attendance.employee_id == employee_id)
    if status is not None:
        conditions.append(Attendance.status == status)
    if month is not None and year is not None:
        start_date, end_date = month_bounds(year, month)
    if start_date is not None:
        conditions.append(Attendance.date >= start_date)
    if end_date is not None:
        conditions.append(Attendance.date <= end_date)

    stmt = (
        select(Attendance)
        .options(selectinload(Attendance.employee))
        .where(*conditions)
        .order_by(Attendance.date.desc(), Attendance.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    rows = (await db.execute(stmt)).scalars().all()
    total = (await db.execute(select(func.count(Attendance.id)).where(*conditions))).scalar_one()
    return list(rows), total


async def get_employee_month(
    db: AsyncSession,
    employee_id: UUID,
    month: Optional[int],
    year: Optional[int],
) -> Tuple[List[Attendance], MonthStats]:
    """Records for one employee in one month (oldest first) with per-status counts."""
    _validate_month_year(month, year)
    start, end = month_bounds(year, month)
    stmt = (
        select(Attendance)
        .options(selectinload(Attendance.employee))
        .where(
            Attendance.employee_id == employee_id,
            Attendance.date >= start,
            Attendance.date <= end,
        )
        .order_by(Attendance.date.asc())
    )
    rows = list((await db.execute(stmt)).scalars().all())
    counts = _count_by_status((r.status, 1) for r in rows)
    return rows, MonthStats(**counts, total=days_in_month(year, month))


async def get_attendance(db: AsyncSession, attendance_id: UUID) -> Attendance:
    record = await _load(db, attendance_id)
    if not record:
        raise NotFoundError("Attendance record not found")
    return record


def _apply_provided(record: Attendance, payload: AttendanceMark) -> None:
    # Omitted/blank optional fields never clear what is already stored
    for field in OPTIONAL_FIELDS:
        value = getattr(payload, field)
        if value:
            setattr(record, field, value)


async def upsert_attendance(
    db: AsyncSession,
    payload: AttendanceMark,
    marked_by: Optional[UUID] = None,
) -> Tuple[Attendance, bool]:
    """Create the (employee, day) record or update the existing one.

    Returns (record, created). The unique constraint on (employee_id, date) decides
    between the two when concurrent requests race past the lookup.
    """
    await _require_employee(db, payload.employee)
    day = to_calendar_day(payload.att_date)

    existing = await find_for_day(db, payload.employee, day)
    if existing is None:
        record = Attendance(
            employee_id=payload.employee,
            date=day,
            status=payload.status,
            marked_by=marked_by,
            **{field: getattr(payload, field) for field in OPTIONAL_FIELDS},
        )
        db.add(record)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.warning(
                "Concurrent attendance insert for employee %s on %s; updating existing record",
                payload.employee,
                day,
            )
            existing = await find_for_day(db, payload.employee, day)
            if existing is None:
                raise ConflictError("Attendance could not be recorded, please retry")
        else:
            logger.info("Attendance created for employee %s on %s", payload.employee, day)
            return await _load(db, record.id), True

    existing.status = payload.status
    _apply_provided(existing, payload)
    if marked_by is not None:
        existing.marked_by = marked_by
    await db.commit()
    logger.info("Attendance updated for employee %s on %s", payload.employee, day)
    return await _load(db, existing.id), False


async def update_attendance(
    db: AsyncSession,
    attendance_id: UUID,
    payload: AttendanceUpdate,
    marked_by: Optional[UUID] = None,
) -> Attendance:
    record = await get_attendance(db, attendance_id)
    data = payload.model_dump(exclude_unset=True)

    if "employee" in data:
        await _require_employee(db, data["employee"])
        record.employee_id = data["employee"]
    if "att_date" in data:
        record.date = to_calendar_day(data["att_date"])
    if "status" in data:
        record.status = data["status"]
    for field in OPTIONAL_FIELDS:
        if field in data:
            setattr(record, field, data[field])
    if marked_by is not None:
        record.marked_by = marked_by

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Attendance already exists for this employee on this date")
    return await _load(db, attendance_id)


async def delete_attendance(db: AsyncSession, attendance_id: UUID) -> None:
    record = await get_attendance(db, attendance_id)
    await db.delete(record)
    await db.commit()


async def get_attendance_stats(
    db: AsyncSession,
    *,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    today: Optional[date] = None,
) -> AttendanceStats:
    """Status counts over month+year, else start..end, else the current month."""
    if month is not None and year is not None:
        start, end = month_bounds(year, month)
    elif start_date is not None and end_date is not None:
        start, end = start_date, end_date
    else:
        start, end = current_month_bounds(today)

    result = await db.execute(
        select(Attendance.status, func.count(Attendance.id))
        .where(Attendance.date >= start, Attendance.date <= end)
        .group_by(Attendance.status)
    )
    counts = _count_by_status(result.all())
    total_employees = (
        await db.execute(select(func.count(Employee.id)).where(Employee.status == EmployeeStatus.ACTIVE))
    ).scalar_one()

    present_percentage = 0.0
    if total_employees > 0:
        present_percentage = round(counts["present"] / total_employees * 100, 2)

    return AttendanceStats(
        **counts,
        total=sum(counts.values()),
        total_employees=total_employees,
        present_percentage=present_percentage,
    )
