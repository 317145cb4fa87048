import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import EmployeeStatus
from app.core.exceptions import ConflictError, NotFoundError
from app.core.models import Attendance, Employee

from .schemas import EmployeeCreate, EmployeeStats, EmployeeUpdate

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "Employee with this email already exists"


async def list_employees(
    db: AsyncSession,
    *,
    status: Optional[EmployeeStatus] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Employee], int]:
    """Page of employees (newest first) and the total number matching the filters."""
    conditions = []
    if status is not None:
        conditions.append(Employee.status == status)
    if search:
        conditions.append(
            or_(
                Employee.name.icontains(search, autoescape=True),
                Employee.email.icontains(search, autoescape=True),
                Employee.role.icontains(search, autoescape=True),
            )
        )

    stmt = (
        select(Employee)
        .where(*conditions)
        .order_by(Employee.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    rows = (await db.execute(stmt)).scalars().all()
    total = (await db.execute(select(func.count(Employee.id)).where(*conditions))).scalar_one()
    return list(rows), total


async def get_employee(db: AsyncSession, employee_id: UUID) -> Employee:
    employee = await db.get(Employee, employee_id)
    if not employee:
        raise NotFoundError("Employee not found")
    return employee


async def create_employee(db: AsyncSession, payload: EmployeeCreate) -> Employee:
    employee = Employee(**payload.model_dump())
    db.add(employee)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
    await db.refresh(employee)
    logger.info("Created employee %s", employee.id)
    return employee


async def update_employee(db: AsyncSession, employee_id: UUID, payload: EmployeeUpdate) -> Employee:
    employee = await get_employee(db, employee_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(employee, field, value)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
    await db.refresh(employee)
    return employee


async def delete_employee(db: AsyncSession, employee_id: UUID) -> None:
    """Hard delete. The employee's attendance rows go with it."""
    employee = await get_employee(db, employee_id)
    await db.execute(delete(Attendance).where(Attendance.employee_id == employee.id))
    await db.delete(employee)
    await db.commit()
    logger.info("Deleted employee %s", employee_id)


async def get_employee_stats(db: AsyncSession) -> EmployeeStats:
    result = await db.execute(select(Employee.status, func.count(Employee.id)).group_by(Employee.status))
    by_status = {s.value: 0 for s in EmployeeStatus}
    for status, count in result.all():
        by_status[EmployeeStatus(status).value] = count
    return EmployeeStats(
        total=sum(by_status.values()),
        active=by_status[EmployeeStatus.ACTIVE.value],
        stats=by_status,
    )
