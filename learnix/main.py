import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from learnix.core.config import settings
from learnix.core.database import engine
from learnix.core.exceptions import AuthorizationError, ContentNotFound, RedirectRequired
from learnix.core.http import close_http_clients
from learnix.core.logging_config import setup_logging
import learnix.models  # noqa: F401
from learnix.models.base import Base
from learnix.routers import admin as admin_router
from learnix.routers import courses as courses_router
from learnix.routers import live as live_router
from learnix.routers import me as me_router
from learnix.routers import mentor as mentor_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if engine is not None:
        Base.metadata.create_all(bind=engine)
    else:
        logger.info("DATABASE_URL not set; local database features are disabled")
    try:
        yield
    finally:
        await close_http_clients()


async def redirect_handler(request: Request, exc: RedirectRequired) -> RedirectResponse:
    return RedirectResponse(exc.location, status_code=status.HTTP_303_SEE_OTHER)


async def not_found_handler(request: Request, exc: ContentNotFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Not found"})


async def authorization_handler(request: Request, exc: AuthorizationError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def create_app() -> FastAPI:
    setup_logging(settings.log_level)
    application = FastAPI(title="Learnix Portal API", lifespan=lifespan)
    application.add_exception_handler(RedirectRequired, redirect_handler)
    application.add_exception_handler(ContentNotFound, not_found_handler)
    application.add_exception_handler(AuthorizationError, authorization_handler)
    application.include_router(me_router.router)
    application.include_router(courses_router.router)
    application.include_router(live_router.router)
    application.include_router(mentor_router.router)
    application.include_router(admin_router.router)
    application.include_router(admin_router.actions_router)
    return application


app = create_app()
