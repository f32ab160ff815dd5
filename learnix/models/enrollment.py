import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Column, DateTime, Enum as SqlEnum, Float, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from learnix.models.base import Base, utcnow


class EnrollmentStatus(str, Enum):
    PENDING = "Pending"
    ACTIVE = "Active"
    CANCELLED = "Cancelled"


class Enrollment(Base):
    __tablename__ = "enrollments"
    __table_args__ = (UniqueConstraint("user_id", "course_id", name="uq_enrollment_user_course"),)

    id: str = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: str = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    course_id: str = Column(String, ForeignKey("courses.id"), nullable=False, index=True)
    status: EnrollmentStatus = Column(
        SqlEnum(
            EnrollmentStatus,
            name="enrollment_status",
            native_enum=False,
            values_callable=lambda members: [member.value for member in members],
        ),
        default=EnrollmentStatus.PENDING,
        nullable=False,
    )
    amount: float = Column(Float, nullable=False, default=0)
    created_at: datetime = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User", back_populates="enrollments")
    course = relationship("Course", back_populates="enrollments")
