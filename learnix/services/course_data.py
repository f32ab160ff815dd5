from typing import List

from learnix.clients.api_client import ApiClient
from learnix.core.context import RequestContext
from learnix.core.exceptions import ContentNotFound
from learnix.schemas.course import CourseDetail, CourseSummary, LessonContent
from learnix.services.records import parse_record, parse_records, with_chapter_alias


class CourseDataService:
    def __init__(self, api: ApiClient | None = None):
        self.api = api or ApiClient()

    async def get_all_courses(self) -> List[CourseSummary]:
        """Public catalogue; no session needed."""
        response = await self.api.get("/courses")
        return parse_records(CourseSummary, response.data) if response.success else []

    async def get_course(self, slug: str) -> CourseDetail:
        return await self._course(slug, token=None)

    async def get_course_sidebar(self, ctx: RequestContext, slug: str) -> CourseDetail:
        """Course tree with the caller's lesson progress when a session is present."""
        return await self._course(slug, token=ctx.auth_token)

    async def get_lesson_content(self, ctx: RequestContext, lesson_id: str) -> LessonContent:
        token = ctx.auth_token
        if not token:
            raise ContentNotFound("lesson")
        response = await self.api.get(f"/lessons/{lesson_id}/content", token=token)
        lesson = parse_record(LessonContent, response.data) if response.success else None
        if lesson is None:
            raise ContentNotFound("lesson")
        return lesson

    async def _course(self, slug: str, token) -> CourseDetail:
        response = await self.api.get(f"/courses/{slug}", token=token)
        if not response.success or not isinstance(response.data, dict):
            raise ContentNotFound("course")
        course = parse_record(CourseDetail, with_chapter_alias(response.data))
        if course is None:
            raise ContentNotFound("course")
        return course
