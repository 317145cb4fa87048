import logging
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple, Type
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import Admin
from app.core.enums import ENQUIRY_FINAL_STATUSES, EnquiryChannel, EnquiryPriority, EnquiryStatus
from app.core.exceptions import NotFoundError
from app.core.models import Enquiry

from .schemas import EnquiryCreate, EnquiryStats, EnquiryUpdate

logger = logging.getLogger(__name__)


async def _require_assignee(db: AsyncSession, admin_id: Optional[UUID]) -> None:
    if admin_id is not None and not await db.get(Admin, admin_id):
        raise NotFoundError("Assigned admin not found")


async def list_enquiries(
    db: AsyncSession,
    *,
    status: Optional[EnquiryStatus] = None,
    priority: Optional[EnquiryPriority] = None,
    channel: Optional[EnquiryChannel] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Enquiry], int]:
    conditions = []
    if status is not None:
        conditions.append(Enquiry.status == status)
    if priority is not None:
        conditions.append(Enquiry.priority == priority)
    if channel is not None:
        conditions.append(Enquiry.channel == channel)
    if search:
        conditions.append(
            or_(
                Enquiry.name.icontains(search, autoescape=True),
                Enquiry.email.icontains(search, autoescape=True),
                Enquiry.topic.icontains(search, autoescape=True),
                Enquiry.message.icontains(search, autoescape=True),
            )
        )

    stmt = (
        select(Enquiry)
        .where(*conditions)
        .order_by(Enquiry.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    rows = (await db.execute(stmt)).scalars().all()
    total = (await db.execute(select(func.count(Enquiry.id)).where(*conditions))).scalar_one()
    return list(rows), total


async def get_enquiry(db: AsyncSession, enquiry_id: UUID) -> Enquiry:
    enquiry = await db.get(Enquiry, enquiry_id)
    if not enquiry:
        raise NotFoundError("Enquiry not found")
    return enquiry


async def create_enquiry(db: AsyncSession, payload: EnquiryCreate) -> Enquiry:
    await _require_assignee(db, payload.assigned_to)
    enquiry = Enquiry(**payload.model_dump())
    if enquiry.status in ENQUIRY_FINAL_STATUSES:
        enquiry.resolved_at = datetime.utcnow()
    db.add(enquiry)
    await db.commit()
    await db.refresh(enquiry)
    logger.info("Created enquiry %s (%s)", enquiry.id, enquiry.channel.value)
    return enquiry


async def update_enquiry(db: AsyncSession, enquiry_id: UUID, payload: EnquiryUpdate) -> Enquiry:
    enquiry = await get_enquiry(db, enquiry_id)
    data = payload.model_dump(exclude_unset=True)
    if "assigned_to" in data:
        await _require_assignee(db, data["assigned_to"])

    # Decided on the stored record before any field is overwritten
    stamp_resolved = data.get("status") in ENQUIRY_FINAL_STATUSES and enquiry.resolved_at is None

    for field, value in data.items():
        setattr(enquiry, field, value)
    if stamp_resolved:
        enquiry.resolved_at = datetime.utcnow()
        logger.info("Enquiry %s resolved (%s)", enquiry.id, enquiry.status.value)

    await db.commit()
    await db.refresh(enquiry)
    return enquiry


async def delete_enquiry(db: AsyncSession, enquiry_id: UUID) -> None:
    enquiry = await get_enquiry(db, enquiry_id)
    await db.delete(enquiry)
    await db.commit()


async def _breakdown(db: AsyncSession, column, enum_cls: Type[Enum]) -> Dict[str, int]:
    counts = {member.value: 0 for member in enum_cls}
    result = await db.execute(select(column, func.count(Enquiry.id)).group_by(column))
    for value, n in result.all():
        counts[enum_cls(value).value] = n
    return counts


async def get_enquiry_stats(db: AsyncSession) -> EnquiryStats:
    by_status = await _breakdown(db, Enquiry.status, EnquiryStatus)
    by_priority = await _breakdown(db, Enquiry.priority, EnquiryPriority)
    by_channel = await _breakdown(db, Enquiry.channel, EnquiryChannel)
    return EnquiryStats(
        total=sum(by_status.values()),
        new=by_status[EnquiryStatus.NEW.value],
        in_progress=by_status[EnquiryStatus.IN_PROGRESS.value],
        resolved=by_status[EnquiryStatus.RESOLVED.value],
        status_breakdown=by_status,
        priority_breakdown=by_priority,
        channel_breakdown=by_channel,
    )
