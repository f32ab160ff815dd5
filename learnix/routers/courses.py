from fastapi import APIRouter, Depends
from pydantic import BaseModel

from learnix.core.context import RequestContext, get_request_context
from learnix.schemas.common import ActionResult
from learnix.schemas.course import CourseDetail, CourseSummary, LessonContent
from learnix.services.actions import LearnerActions
from learnix.services.course_data import CourseDataService

router = APIRouter(tags=["courses"])
course_service = CourseDataService()
learner_actions = LearnerActions()


def get_course_service() -> CourseDataService:
    return course_service


def get_learner_actions() -> LearnerActions:
    return learner_actions


class LessonCompletion(BaseModel):
    slug: str


@router.get("/courses", response_model=list[CourseSummary])
async def list_courses(service: CourseDataService = Depends(get_course_service)) -> list[CourseSummary]:
    return await service.get_all_courses()


@router.get("/courses/{slug}", response_model=CourseDetail)
async def read_course(slug: str, service: CourseDataService = Depends(get_course_service)) -> CourseDetail:
    return await service.get_course(slug)


@router.get("/courses/{slug}/sidebar", response_model=CourseDetail)
async def course_sidebar(
    slug: str,
    ctx: RequestContext = Depends(get_request_context),
    service: CourseDataService = Depends(get_course_service),
) -> CourseDetail:
    return await service.get_course_sidebar(ctx, slug)


@router.get("/lessons/{lesson_id}/content", response_model=LessonContent)
async def lesson_content(
    lesson_id: str,
    ctx: RequestContext = Depends(get_request_context),
    service: CourseDataService = Depends(get_course_service),
) -> LessonContent:
    return await service.get_lesson_content(ctx, lesson_id)


@router.post("/lessons/{lesson_id}/complete", response_model=ActionResult)
async def complete_lesson(
    lesson_id: str,
    payload: LessonCompletion,
    ctx: RequestContext = Depends(get_request_context),
    actions: LearnerActions = Depends(get_learner_actions),
) -> ActionResult:
    return await actions.mark_lesson_complete(ctx, lesson_id, payload.slug)
