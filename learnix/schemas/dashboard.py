from typing import List, Optional

from pydantic import Field

from learnix.schemas.common import PortalModel


class DailyStat(PortalModel):
    date: str
    signups: int = 0
    enrollments: int = 0


class DashboardStats(PortalModel):
    total_signups: int = 0
    total_customers: int = 0
    total_courses: int = 0
    total_lessons: int = 0
    recent_signups: int = 0
    active_users: int = 0
    stats_by_date: List[DailyStat] = Field(default_factory=list)


class TopCourse(PortalModel):
    course_id: str
    title: str = ""
    enrollments: int = 0


class EnrollmentStats(PortalModel):
    total_enrollments: int = 0
    active_enrollments: int = 0
    revenue: float = 0
    top_courses: List[TopCourse] = Field(default_factory=list)


class EnrollmentDay(PortalModel):
    date: str
    enrollment: int = 0


class AnalyticsData(PortalModel):
    dashboard: Optional[DashboardStats] = None
    enrollment: Optional[EnrollmentStats] = None
