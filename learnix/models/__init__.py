from learnix.models.base import Base
from learnix.models.course import Chapter, Course, CourseStatus, Lesson
from learnix.models.enrollment import Enrollment, EnrollmentStatus
from learnix.models.user import User, UserRole, normalize_role

__all__ = [
    "Base",
    "Chapter",
    "Course",
    "CourseStatus",
    "Enrollment",
    "EnrollmentStatus",
    "Lesson",
    "User",
    "UserRole",
    "normalize_role",
]
