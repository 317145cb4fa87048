import uuid
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.core.enums import EmployeeStatus
from app.db.session import Base
from app.db.types import str_enum


class Employee(Base):
    """Staff member managed by admins. Hard delete only."""

    __tablename__ = "employees"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    # Stored lower-cased and trimmed
    email = Column(String(255), nullable=False, unique=True, index=True)
    role = Column(String(100), nullable=False)
    status = Column(str_enum(EmployeeStatus), nullable=False, default=EmployeeStatus.ACTIVE, index=True)
    phone = Column(String(50), nullable=True)
    department = Column(String(100), nullable=True)
    joining_date = Column(Date, nullable=True)
    address = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    attendance = relationship("Attendance", back_populates="employee", passive_deletes=True)
