import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.core.enums import EnquiryChannel, EnquiryPriority, EnquiryStatus
from app.db.session import Base
from app.db.types import str_enum


class Enquiry(Base):
    """Customer/lead enquiry. resolved_at is stamped once, on the first move to Resolved/Closed."""

    __tablename__ = "enquiries"
    __table_args__ = (
        Index("ix_enquiries_status_priority", "status", "priority"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    topic = Column(String(255), nullable=False)
    message = Column(Text, nullable=True)
    priority = Column(str_enum(EnquiryPriority), nullable=False, default=EnquiryPriority.MEDIUM)
    channel = Column(str_enum(EnquiryChannel), nullable=False, default=EnquiryChannel.EMAIL)
    status = Column(str_enum(EnquiryStatus), nullable=False, default=EnquiryStatus.NEW)
    assigned_to = Column(Uuid, ForeignKey("admins.id", ondelete="SET NULL"), nullable=True)
    sla = Column(String(100), nullable=True)
    response = Column(Text, nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    assignee = relationship("Admin", foreign_keys=[assigned_to])
