from datetime import datetime
from typing import Dict, Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.core.enums import EnquiryChannel, EnquiryPriority, EnquiryStatus
from app.core.schemas import CamelModel, clean_text, require_text


class EnquiryBase(CamelModel):
    phone: Optional[str] = Field(None, max_length=50)
    message: Optional[str] = None
    assigned_to: Optional[UUID] = None
    sla: Optional[str] = Field(None, max_length=100)
    response: Optional[str] = None

    @field_validator("phone", "message", "sla", "response")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return clean_text(v)


class EnquiryCreate(EnquiryBase):
    name: str = Field(..., max_length=255)
    email: EmailStr
    topic: str = Field(..., max_length=255)
    priority: EnquiryPriority = EnquiryPriority.MEDIUM
    channel: EnquiryChannel = EnquiryChannel.EMAIL
    status: EnquiryStatus = EnquiryStatus.NEW

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        return require_text(v, "Name")

    @field_validator("topic")
    @classmethod
    def topic_required(cls, v: str) -> str:
        return require_text(v, "Topic")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class EnquiryUpdate(EnquiryBase):
    """Partial update: only fields present in the body are applied."""

    name: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    topic: Optional[str] = Field(None, max_length=255)
    priority: Optional[EnquiryPriority] = None
    channel: Optional[EnquiryChannel] = None
    status: Optional[EnquiryStatus] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> str:
        return require_text(v, "Name")

    @field_validator("topic")
    @classmethod
    def topic_not_blank(cls, v: Optional[str]) -> str:
        return require_text(v, "Topic")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("Please provide a valid email")
        return v.strip().lower()

    @field_validator("priority", "channel", "status")
    @classmethod
    def enum_not_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class EnquiryResponse(CamelModel):
    id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    topic: str
    message: Optional[str] = None
    priority: EnquiryPriority
    channel: EnquiryChannel
    status: EnquiryStatus
    assigned_to: Optional[UUID] = None
    sla: Optional[str] = None
    response: Optional[str] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class EnquiryStats(CamelModel):
    total: int
    new: int
    in_progress: int
    resolved: int
    status_breakdown: Dict[str, int]
    priority_breakdown: Dict[str, int]
    channel_breakdown: Dict[str, int]
