from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_resource_admin
from app.core.enums import EmployeeStatus
from app.core.schemas import DeletedResponse, Envelope, Page, page_count
from app.db.session import get_db

from . import service
from .schemas import EmployeeCreate, EmployeeResponse, EmployeeStats, EmployeeUpdate

router = APIRouter(
    prefix="/api/employees",
    tags=["employees"],
    dependencies=[Depends(get_resource_admin)],
)


@router.get("/stats/overview", response_model=Envelope[EmployeeStats])
async def employee_stats(db: AsyncSession = Depends(get_db)) -> Envelope[EmployeeStats]:
    return Envelope(data=await service.get_employee_stats(db))


@router.get("", response_model=Page[EmployeeResponse])
async def list_employees(
    status_filter: Optional[EmployeeStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Case-insensitive match on name, email or role"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> Page[EmployeeResponse]:
    rows, total = await service.list_employees(
        db, status=status_filter, search=search, page=page, limit=limit
    )
    return Page(
        count=len(rows),
        total=total,
        page=page,
        pages=page_count(total, limit),
        data=[EmployeeResponse.model_validate(e) for e in rows],
    )


@router.get("/{employee_id}", response_model=Envelope[EmployeeResponse])
async def get_employee(
    employee_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> Envelope[EmployeeResponse]:
    employee = await service.get_employee(db, employee_id)
    return Envelope(data=EmployeeResponse.model_validate(employee))


@router.post(
    "",
    response_model=Envelope[EmployeeResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_employee(
    payload: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
) -> Envelope[EmployeeResponse]:
    employee = await service.create_employee(db, payload)
    return Envelope(data=EmployeeResponse.model_validate(employee))


@router.put("/{employee_id}", response_model=Envelope[EmployeeResponse])
async def update_employee(
    employee_id: UUID,
    payload: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
) -> Envelope[EmployeeResponse]:
    employee = await service.update_employee(db, employee_id, payload)
    return Envelope(data=EmployeeResponse.model_validate(employee))


@router.delete("/{employee_id}", response_model=DeletedResponse)
async def delete_employee(
    employee_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> DeletedResponse:
    await service.delete_employee(db, employee_id)
    return DeletedResponse(message="Employee deleted successfully")
