from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.core.schemas import CamelModel


class LoginRequest(CamelModel):
    # Plain str: an unknown or malformed email is an auth failure, not a validation one
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Optional[str] = Field(None, max_length=50)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class AdminSummary(CamelModel):
    """Public admin identity. Never includes the password hash."""

    id: UUID
    name: str
    email: str
    role: str


class AdminProfile(AdminSummary):
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class LoginData(CamelModel):
    token: str
    admin: AdminSummary
