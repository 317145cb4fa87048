import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String, Text, Uuid

from app.db.session import Base


class Admin(Base):
    """Operator account. The only authenticated role in the system."""

    __tablename__ = "admins"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    # Stored lower-cased and trimmed
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    role = Column(String(50), nullable=False, default="Admin")
    is_active = Column(Boolean, nullable=False, default=True)
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
