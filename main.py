import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import structlog
from fastapi import FastAPI, Depends, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import schemas
from catalog import Catalog
from database import Store, get_store
from dates import get_timezone, today
from errors import StudyTrackerError
from planner import TargetPlanner
from progress import subject_progress, target_progress
from settings import Settings

logger = structlog.get_logger(__name__)


def configure_logging(level: str = "INFO") -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper(), logging.INFO)),
    )


def get_catalog(store: Store = Depends(get_store)) -> Catalog:
    return Catalog(store)


def get_planner(request: Request, catalog: Catalog = Depends(get_catalog)) -> TargetPlanner:
    settings: Settings = request.app.state.settings
    return TargetPlanner(
        catalog.store,
        catalog=catalog,
        validate_references=settings.validate_target_references,
        tz=request.app.state.tz,
    )


async def handle_study_tracker_error(request: Request, exc: StudyTrackerError) -> JSONResponse:
    logger.info("api.request_failed", path=request.url.path, error=exc.kind, detail=exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "error": exc.kind})


def register_routes(app: FastAPI) -> None:
    @app.get("/health")
    def health():
        return {"status": "ok"}

    # SUBJECTS ENDPOINTS
    @app.get("/subjects", response_model=List[schemas.Subject])
    def read_subjects(catalog: Catalog = Depends(get_catalog)):
        return catalog.get_all_subjects()

    @app.post("/subjects", response_model=schemas.Subject, status_code=status.HTTP_201_CREATED)
    def create_subject(subject: schemas.SubjectCreate, catalog: Catalog = Depends(get_catalog)):
        return catalog.add_subject(subject.name)

    @app.get("/subjects/{subject_name}", response_model=schemas.Subject)
    def read_subject(subject_name: str, catalog: Catalog = Depends(get_catalog)):
        return catalog.get_subject(subject_name)

    @app.get("/subjects/{subject_name}/progress", response_model=schemas.SubjectProgress)
    def read_subject_progress(subject_name: str, catalog: Catalog = Depends(get_catalog)):
        return subject_progress(catalog.get_subject(subject_name))

    # CHAPTERS ENDPOINTS
    @app.post(
        "/subjects/{subject_name}/chapters",
        response_model=schemas.Chapter,
        status_code=status.HTTP_201_CREATED,
    )
    def create_chapter(subject_name: str, chapter: schemas.ChapterCreate, catalog: Catalog = Depends(get_catalog)):
        return catalog.add_chapter(subject_name, chapter.name, chapter.totalPages)

    @app.post("/subjects/{subject_name}/chapters/{chapter_name}/complete", response_model=schemas.Message)
    def complete_chapter(subject_name: str, chapter_name: str, catalog: Catalog = Depends(get_catalog)):
        catalog.complete_chapter(subject_name, chapter_name)
        return {"message": "Chapter completed"}

    # STUDY TARGETS ENDPOINTS
    @app.get("/targets", response_model=List[schemas.StudyTarget])
    def read_targets_in_range(
        start: str = Query(...), end: str = Query(...), planner: TargetPlanner = Depends(get_planner)
    ):
        return planner.get_study_targets_in_range(start, end)

    @app.get("/targets/today", response_model=Optional[schemas.StudyTarget])
    def read_todays_target(request: Request, planner: TargetPlanner = Depends(get_planner)):
        return planner.find_study_target(today(request.app.state.tz))

    @app.put("/targets/{day}", response_model=schemas.StudyTarget)
    def set_target(day: str, target: schemas.StudyTargetSet, planner: TargetPlanner = Depends(get_planner)):
        return planner.set_study_target(day, target.subjects, target.chapters)

    @app.get("/targets/{day}", response_model=schemas.StudyTarget)
    def read_target(day: str, planner: TargetPlanner = Depends(get_planner)):
        return planner.get_study_target(day)

    @app.post("/targets/{day}/complete", response_model=schemas.Message)
    def complete_target(day: str, planner: TargetPlanner = Depends(get_planner)):
        planner.complete_study_target(day)
        return {"message": "Study target completed"}

    @app.get("/targets/{day}/progress", response_model=schemas.TargetProgress)
    def read_target_progress(day: str, planner: TargetPlanner = Depends(get_planner)):
        target = planner.get_study_target(day)
        return target_progress(target, planner.catalog.get_all_subjects())


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    store = Store(settings.database_url)
    store.create_all()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("api.startup", database=store.engine.url.render_as_string(hide_password=True))
        yield
        store.dispose()

    app = FastAPI(title="Study Tracker API", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.tz = get_timezone(settings.timezone)

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StudyTrackerError, handle_study_tracker_error)
    register_routes(app)
    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:create_app", factory=True, host="0.0.0.0", port=8000)
