import uuid
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.core.enums import AttendanceStatus
from app.db.session import Base
from app.db.types import str_enum


class Attendance(Base):
    """Daily attendance: one row per employee per calendar day."""

    __tablename__ = "attendance"
    __table_args__ = (
        # The upsert relies on this constraint, not on the lookup before insert
        UniqueConstraint("employee_id", "date", name="uq_attendance_employee_date"),
        Index("ix_attendance_date_status", "date", "status"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    employee_id = Column(Uuid, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    status = Column(str_enum(AttendanceStatus), nullable=False)
    check_in_time = Column(String(20), nullable=True)  # free-form, e.g. "09:15"
    check_out_time = Column(String(20), nullable=True)
    location = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    marked_by = Column(Uuid, ForeignKey("admins.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    employee = relationship("Employee", back_populates="attendance")
    marker = relationship("Admin", foreign_keys=[marked_by])
