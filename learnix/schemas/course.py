from typing import List, Optional

from pydantic import Field

from learnix.schemas.common import PortalModel


class CourseSummary(PortalModel):
    """Catalogue card shared by the public and admin course listings."""

    id: str
    title: str = ""
    small_description: str = ""
    slug: str = ""
    file_key: Optional[str] = None
    price: float = 0
    duration: int = 0
    level: str = ""
    category: str = ""
    status: Optional[str] = None
    chapter_count: Optional[int] = None


class LessonProgress(PortalModel):
    id: Optional[str] = None
    lesson_id: str
    completed: bool = False


class LessonRecord(PortalModel):
    id: str
    title: str = ""
    description: Optional[str] = None
    thumbnail_key: Optional[str] = None
    video_key: Optional[str] = None
    position: int = 0
    lesson_progress: List[LessonProgress] = Field(default_factory=list)


class ChapterRecord(PortalModel):
    id: str
    title: str = ""
    position: int = 0
    lessons: List[LessonRecord] = Field(default_factory=list)


class CourseDetail(CourseSummary):
    description: str = ""
    chapter: List[ChapterRecord] = Field(default_factory=list)
    original_identifier: Optional[str] = None


class LessonContent(LessonRecord):
    chapter_info: Optional[dict] = Field(None, alias="Chapter")


class EnrolledCourse(PortalModel):
    status: str
    course: CourseDetail = Field(alias="Course")
