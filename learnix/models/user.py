import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship

from learnix.models.base import Base, utcnow


class UserRole(str, Enum):
    ADMIN = "admin"
    MENTOR = "mentor"
    USER = "user"


def normalize_role(role: Optional[str]) -> Optional[UserRole]:
    """Case-insensitive role lookup; unknown or empty values map to None."""
    if isinstance(role, UserRole):
        return role
    if not role:
        return None
    try:
        return UserRole(str(role).strip().lower())
    except ValueError:
        return None


class User(Base):
    __tablename__ = "users"

    id: str = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    external_id: str = Column(String, unique=True, nullable=False, index=True)
    name: str = Column(String, nullable=False)
    email: str = Column(String, unique=True, nullable=False, index=True)
    image: Optional[str] = Column(String, nullable=True)
    email_verified: bool = Column(Boolean, default=False, nullable=False)
    # Stored as given by the backend; compare through normalize_role.
    role: Optional[str] = Column(String, nullable=True)
    banned: bool = Column(Boolean, default=False, nullable=False)
    created_at: datetime = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: datetime = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    enrollments = relationship("Enrollment", back_populates="user")
