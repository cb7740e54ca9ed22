"""Subjects and their chapters."""

from __future__ import annotations

import structlog
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

import models, schemas
from database import Store
from errors import (
    ChapterNotFound,
    DuplicateChapter,
    DuplicateSubject,
    InvalidArgument,
    SubjectNotFound,
)

logger = structlog.get_logger(__name__)


def _require_name(value: str, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgument(f"{what} name must be a non-empty string")
    return value


def _to_schema(subject: models.Subject) -> schemas.Subject:
    return schemas.Subject(
        name=subject.name,
        chapters=[
            schemas.Chapter(name=c.name, totalPages=c.total_pages, isComplete=c.is_complete)
            for c in subject.chapters
        ],
    )


class Catalog:
    """Owns Subjects and Chapters.

    Every call runs in its own transaction on ``store``; mutations hold the
    store's write lock so the existence checks and the insert see the same
    state.
    """

    def __init__(self, store: Store):
        self.store = store

    def _find_subject(self, db: Session, name: str) -> models.Subject | None:
        return db.query(models.Subject).filter(models.Subject.name == name).first()

    def _load_subject(self, db: Session, name: str) -> models.Subject:
        subject = self._find_subject(db, name)
        if subject is None:
            raise SubjectNotFound(name)
        return subject

    def add_subject(self, name: str) -> schemas.Subject:
        _require_name(name, "Subject")
        try:
            with self.store.write() as db:
                if self._find_subject(db, name) is not None:
                    raise DuplicateSubject(name)
                subject = models.Subject(name=name)
                db.add(subject)
                db.flush()
                created = _to_schema(subject)
        except IntegrityError as exc:
            raise DuplicateSubject(name) from exc

        logger.info("catalog.subject_added", subject=name)
        return created

    def add_chapter(self, subject_name: str, chapter_name: str, total_pages: int) -> schemas.Chapter:
        _require_name(chapter_name, "Chapter")
        if isinstance(total_pages, bool) or not isinstance(total_pages, int) or total_pages < 0:
            raise InvalidArgument(f"totalPages must be a non-negative integer, got {total_pages!r}")

        try:
            with self.store.write() as db:
                subject = self._load_subject(db, subject_name)
                if any(c.name == chapter_name for c in subject.chapters):
                    raise DuplicateChapter(subject_name, chapter_name)
                next_position = (
                    db.query(func.coalesce(func.max(models.Chapter.position), -1))
                    .filter(models.Chapter.subject_id == subject.id)
                    .scalar()
                    + 1
                )
                chapter = models.Chapter(
                    subject_id=subject.id,
                    position=next_position,
                    name=chapter_name,
                    total_pages=total_pages,
                    is_complete=False,
                )
                db.add(chapter)
        except IntegrityError as exc:
            raise DuplicateChapter(subject_name, chapter_name) from exc

        logger.info(
            "catalog.chapter_added",
            subject=subject_name,
            chapter=chapter_name,
            total_pages=total_pages,
        )
        return schemas.Chapter(name=chapter_name, totalPages=total_pages, isComplete=False)

    def complete_chapter(self, subject_name: str, chapter_name: str) -> None:
        """Mark a chapter complete. Completing it again changes nothing."""
        with self.store.write() as db:
            subject = self._load_subject(db, subject_name)
            chapter = next((c for c in subject.chapters if c.name == chapter_name), None)
            if chapter is None:
                raise ChapterNotFound(subject_name, chapter_name)
            if chapter.is_complete:
                logger.debug("catalog.chapter_already_complete", subject=subject_name, chapter=chapter_name)
                return
            chapter.is_complete = True

        logger.info("catalog.chapter_completed", subject=subject_name, chapter=chapter_name)

    def get_all_subjects(self) -> list[schemas.Subject]:
        with self.store.session() as db:
            subjects = (
                db.query(models.Subject)
                .options(selectinload(models.Subject.chapters))
                .order_by(models.Subject.id)
                .all()
            )
            return [_to_schema(s) for s in subjects]

    def get_subject(self, subject_name: str) -> schemas.Subject:
        with self.store.session() as db:
            return _to_schema(self._load_subject(db, subject_name))

    def require_chapter(self, subject_name: str, chapter_name: str) -> None:
        """Raise unless ``chapter_name`` exists under ``subject_name``."""
        with self.store.session() as db:
            subject = self._load_subject(db, subject_name)
            if not any(c.name == chapter_name for c in subject.chapters):
                raise ChapterNotFound(subject_name, chapter_name)
