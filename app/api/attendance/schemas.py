from datetime import date, datetime
from typing import List, Optional, Union
from uuid import UUID

from pydantic import Field, field_validator

from app.api.employees.schemas import EmployeeSummary
from app.core.enums import AttendanceStatus
from app.core.schemas import CamelModel, clean_text

# Accepts "2024-03-05" as well as full ISO datetimes; the service truncates to the day.
DateInput = Union[datetime, date]


class AttendanceOptionalFields(CamelModel):
    check_in_time: Optional[str] = Field(None, max_length=20)
    check_out_time: Optional[str] = Field(None, max_length=20)
    location: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None

    @field_validator("check_in_time", "check_out_time", "location", "notes")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        return clean_text(v)


class AttendanceMark(AttendanceOptionalFields):
    """POST body: create or update the record for (employee, day)."""

    employee: UUID
    att_date: DateInput = Field(..., alias="date")
    status: AttendanceStatus


class AttendanceUpdate(AttendanceOptionalFields):
    """PUT body: partial update of one record."""

    employee: Optional[UUID] = None
    att_date: Optional[DateInput] = Field(None, alias="date")
    status: Optional[AttendanceStatus] = None

    @field_validator("employee", "att_date", "status")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class AttendanceResponse(CamelModel):
    id: UUID
    employee: Optional[EmployeeSummary] = None
    att_date: date = Field(..., alias="date")
    status: AttendanceStatus
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    marked_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime


class MonthStats(CamelModel):
    present: int = 0
    absent: int = 0
    late: int = 0
    wfh: int = 0
    # Calendar days in the month, not number of records
    total: int


class EmployeeMonthResponse(CamelModel):
    success: bool = True
    data: List[AttendanceResponse]
    stats: MonthStats
    month: int
    year: int


class AttendanceStats(CamelModel):
    present: int = 0
    absent: int = 0
    late: int = 0
    wfh: int = 0
    total: int = 0
    total_employees: int = 0
    present_percentage: float = 0
