from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_resource_admin
from app.core.enums import EnquiryChannel, EnquiryPriority, EnquiryStatus
from app.core.schemas import DeletedResponse, Envelope, Page, page_count
from app.db.session import get_db

from . import service
from .schemas import EnquiryCreate, EnquiryResponse, EnquiryStats, EnquiryUpdate

router = APIRouter(
    prefix="/api/enquiries",
    tags=["enquiries"],
    dependencies=[Depends(get_resource_admin)],
)


@router.get("/stats/overview", response_model=Envelope[EnquiryStats])
async def enquiry_stats(db: AsyncSession = Depends(get_db)) -> Envelope[EnquiryStats]:
    return Envelope(data=await service.get_enquiry_stats(db))


@router.get("", response_model=Page[EnquiryResponse])
async def list_enquiries(
    status_filter: Optional[EnquiryStatus] = Query(None, alias="status"),
    priority: Optional[EnquiryPriority] = Query(None),
    channel: Optional[EnquiryChannel] = Query(None),
    search: Optional[str] = Query(None, description="Case-insensitive match on name, email, topic or message"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> Page[EnquiryResponse]:
    rows, total = await service.list_enquiries(
        db,
        status=status_filter,
        priority=priority,
        channel=channel,
        search=search,
        page=page,
        limit=limit,
    )
    return Page(
        count=len(rows),
        total=total,
        page=page,
        pages=page_count(total, limit),
        data=[EnquiryResponse.model_validate(e) for e in rows],
    )


@router.get("/{enquiry_id}", response_model=Envelope[EnquiryResponse])
async def get_enquiry(
    enquiry_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> Envelope[EnquiryResponse]:
    enquiry = await service.get_enquiry(db, enquiry_id)
    return Envelope(data=EnquiryResponse.model_validate(enquiry))


@router.post(
    "",
    response_model=Envelope[EnquiryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_enquiry(
    payload: EnquiryCreate,
    db: AsyncSession = Depends(get_db),
) -> Envelope[EnquiryResponse]:
    enquiry = await service.create_enquiry(db, payload)
    return Envelope(data=EnquiryResponse.model_validate(enquiry))


@router.put("/{enquiry_id}", response_model=Envelope[EnquiryResponse])
async def update_enquiry(
    enquiry_id: UUID,
    payload: EnquiryUpdate,
    db: AsyncSession = Depends(get_db),
) -> Envelope[EnquiryResponse]:
    """Partial update. Moving to Resolved/Closed stamps resolvedAt the first time only."""
    enquiry = await service.update_enquiry(db, enquiry_id, payload)
    return Envelope(data=EnquiryResponse.model_validate(enquiry))


@router.delete("/{enquiry_id}", response_model=DeletedResponse)
async def delete_enquiry(
    enquiry_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> DeletedResponse:
    await service.delete_enquiry(db, enquiry_id)
    return DeletedResponse(message="Enquiry deleted successfully")
