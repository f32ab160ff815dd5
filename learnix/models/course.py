import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, Enum as SqlEnum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from learnix.models.base import Base, utcnow


class CourseStatus(str, Enum):
    DRAFT = "Draft"
    PUBLISHED = "Published"
    ARCHIVED = "Archived"


class Course(Base):
    __tablename__ = "courses"

    id: str = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    slug: str = Column(String, unique=True, nullable=False, index=True)
    title: str = Column(String, nullable=False)
    small_description: str = Column(String, nullable=False, default="")
    description: str = Column(Text, nullable=False, default="")
    category: str = Column(String, nullable=False, default="")
    status: CourseStatus = Column(
        SqlEnum(
            CourseStatus,
            name="course_status",
            native_enum=False,
            values_callable=lambda members: [member.value for member in members],
        ),
        default=CourseStatus.DRAFT,
        nullable=False,
    )
    price: float = Column(Float, nullable=False, default=0)
    duration: int = Column(Integer, nullable=False, default=0)
    level: str = Column(String, nullable=False, default="Beginner")
    file_key: Optional[str] = Column(String, nullable=True)
    created_at: datetime = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    chapters = relationship("Chapter", back_populates="course", order_by="Chapter.position")
    enrollments = relationship("Enrollment", back_populates="course")


class Chapter(Base):
    __tablename__ = "chapters"

    id: str = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    course_id: str = Column(String, ForeignKey("courses.id"), nullable=False, index=True)
    title: str = Column(String, nullable=False)
    position: int = Column(Integer, nullable=False)

    course = relationship("Course", back_populates="chapters")
    lessons = relationship("Lesson", back_populates="chapter", order_by="Lesson.position")


class Lesson(Base):
    __tablename__ = "lessons"

    id: str = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    chapter_id: str = Column(String, ForeignKey("chapters.id"), nullable=False, index=True)
    title: str = Column(String, nullable=False)
    description: Optional[str] = Column(Text, nullable=True)
    thumbnail_key: Optional[str] = Column(String, nullable=True)
    video_key: Optional[str] = Column(String, nullable=True)
    position: int = Column(Integer, nullable=False)

    chapter = relationship("Chapter", back_populates="lessons")
