"""Attendance API router."""

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_resource_admin
from app.auth.models import Admin
from app.core.enums import AttendanceStatus
from app.core.schemas import DeletedResponse, Envelope, Page, page_count
from app.db.session import get_db

from . import service
from .schemas import (
    AttendanceMark,
    AttendanceResponse,
    AttendanceStats,
    AttendanceUpdate,
    EmployeeMonthResponse,
)

router = APIRouter(prefix="/api/attendance", tags=["attendance"])


def _admin_id(admin: Optional[Admin]) -> Optional[UUID]:
    return admin.id if admin else None


@router.get(
    "/stats/overview",
    response_model=Envelope[AttendanceStats],
    dependencies=[Depends(get_resource_admin)],
)
async def attendance_stats(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    db: AsyncSession = Depends(get_db),
) -> Envelope[AttendanceStats]:
    """Counts per status over a month, an explicit range, or the current month by default."""
    stats = await service.get_attendance_stats(
        db, start_date=start_date, end_date=end_date, month=month, year=year
    )
    return Envelope(data=stats)


@router.get(
    "/employee/{employee_id}/month",
    response_model=EmployeeMonthResponse,
    dependencies=[Depends(get_resource_admin)],
)
async def employee_month_attendance(
    employee_id: UUID,
    month: Optional[int] = Query(None),
    year: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> EmployeeMonthResponse:
    """One employee's records for a month with present/absent/late/wfh counts."""
    rows, stats = await service.get_employee_month(db, employee_id, month, year)
    return EmployeeMonthResponse(
        data=[AttendanceResponse.model_validate(r) for r in rows],
        stats=stats,
        month=month,
        year=year,
    )


@router.get(
    "",
    response_model=Page[AttendanceResponse],
    dependencies=[Depends(get_resource_admin)],
)
async def list_attendance(
    employee_id: Optional[UUID] = Query(None, alias="employeeId"),
    status_filter: Optional[AttendanceStatus] = Query(None, alias="status"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
) -> Page[AttendanceResponse]:
    rows, total = await service.list_attendance(
        db,
        employee_id=employee_id,
        status=status_filter,
        start_date=start_date,
        end_date=end_date,
        month=month,
        year=year,
        page=page,
        limit=limit,
    )
    return Page(
        count=len(rows),
        total=total,
        page=page,
        pages=page_count(total, limit),
        data=[AttendanceResponse.model_validate(r) for r in rows],
    )


@router.get(
    "/{attendance_id}",
    response_model=Envelope[AttendanceResponse],
    dependencies=[Depends(get_resource_admin)],
)
async def get_attendance(
    attendance_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> Envelope[AttendanceResponse]:
    record = await service.get_attendance(db, attendance_id)
    return Envelope(data=AttendanceResponse.model_validate(record))


@router.post(
    "",
    response_model=Envelope[AttendanceResponse],
    status_code=status.HTTP_201_CREATED,
)
async def mark_attendance(
    payload: AttendanceMark,
    db: AsyncSession = Depends(get_db),
    current_admin: Optional[Admin] = Depends(get_resource_admin),
) -> Envelope[AttendanceResponse]:
    """Create the day's record for the employee, or update it if one already exists."""
    record, created = await service.upsert_attendance(db, payload, marked_by=_admin_id(current_admin))
    message = "Attendance created successfully" if created else "Attendance updated successfully"
    return Envelope(data=AttendanceResponse.model_validate(record), message=message)


@router.put("/{attendance_id}", response_model=Envelope[AttendanceResponse])
async def update_attendance(
    attendance_id: UUID,
    payload: AttendanceUpdate,
    db: AsyncSession = Depends(get_db),
    current_admin: Optional[Admin] = Depends(get_resource_admin),
) -> Envelope[AttendanceResponse]:
    record = await service.update_attendance(
        db, attendance_id, payload, marked_by=_admin_id(current_admin)
    )
    return Envelope(data=AttendanceResponse.model_validate(record))


@router.delete(
    "/{attendance_id}",
    response_model=DeletedResponse,
    dependencies=[Depends(get_resource_admin)],
)
async def delete_attendance(
    attendance_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> DeletedResponse:
    await service.delete_attendance(db, attendance_id)
    return DeletedResponse(message="Attendance deleted successfully")
