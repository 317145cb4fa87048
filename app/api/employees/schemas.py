from datetime import date, datetime
from typing import Dict, Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.core.enums import EmployeeStatus
from app.core.schemas import CamelModel, clean_text, require_text


class EmployeeBase(CamelModel):
    phone: Optional[str] = Field(None, max_length=50)
    department: Optional[str] = Field(None, max_length=100)
    joining_date: Optional[date] = None
    address: Optional[str] = None

    @field_validator("phone", "department", "address")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return clean_text(v)


class EmployeeCreate(EmployeeBase):
    name: str = Field(..., max_length=255)
    email: EmailStr
    role: str = Field(..., max_length=100)
    status: EmployeeStatus = EmployeeStatus.ACTIVE

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        return require_text(v, "Name")

    @field_validator("role")
    @classmethod
    def role_required(cls, v: str) -> str:
        return require_text(v, "Role")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class EmployeeUpdate(EmployeeBase):
    """Partial update: only fields present in the body are applied."""

    name: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    role: Optional[str] = Field(None, max_length=100)
    status: Optional[EmployeeStatus] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> str:
        return require_text(v, "Name")

    @field_validator("role")
    @classmethod
    def role_not_blank(cls, v: Optional[str]) -> str:
        return require_text(v, "Role")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("Please provide a valid email")
        return v.strip().lower()

    @field_validator("status")
    @classmethod
    def status_not_null(cls, v: Optional[EmployeeStatus]) -> EmployeeStatus:
        if v is None:
            raise ValueError("Invalid status")
        return v


class EmployeeResponse(CamelModel):
    id: UUID
    name: str
    email: str
    role: str
    status: EmployeeStatus
    phone: Optional[str] = None
    department: Optional[str] = None
    joining_date: Optional[date] = None
    address: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class EmployeeSummary(CamelModel):
    """Employee fields embedded in attendance records."""

    id: UUID
    name: str
    email: str
    role: str


class EmployeeStats(CamelModel):
    total: int
    active: int
    # Every EmployeeStatus value -> count
    stats: Dict[str, int]
