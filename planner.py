"""Per-day study targets.

Targets reference chapters by ``(subject, chapter)`` name pairs only; the
catalog keeps the chapter data and the completion truth.
"""

from __future__ import annotations

from datetime import date, tzinfo
from typing import Iterable, Sequence

import structlog
from sqlalchemy.orm import Session

import models, schemas
from catalog import Catalog
from database import Store
from dates import day_to_timestamp, to_day
from errors import InvalidArgument, TargetNotFound

logger = structlog.get_logger(__name__)


def subjects_of(chapters: Iterable[tuple[str, str]]) -> list[str]:
    """Distinct subject names in first-appearance order."""
    seen: list[str] = []
    for subject, _ in chapters:
        if subject not in seen:
            seen.append(subject)
    return seen


def _normalize_chapters(chapters: Iterable[Sequence[str]]) -> list[tuple[str, str]]:
    pairs = []
    for entry in chapters:
        if isinstance(entry, str) or len(entry) != 2:
            raise InvalidArgument(f"Chapter entries must be (subject, chapter) pairs, got {entry!r}")
        subject, chapter = entry
        if not isinstance(subject, str) or not isinstance(chapter, str):
            raise InvalidArgument(f"Chapter entries must be (subject, chapter) pairs, got {entry!r}")
        pairs.append((subject, chapter))
    return pairs


def _normalize_subjects(subjects: Iterable[str]) -> list[str]:
    """Caller's subject names, duplicates dropped, order kept."""
    if isinstance(subjects, str) or not isinstance(subjects, Iterable):
        raise InvalidArgument(f"Subjects must be a list of names, got {subjects!r}")
    names: list[str] = []
    for name in subjects:
        if not isinstance(name, str):
            raise InvalidArgument(f"Subject names must be strings, got {name!r}")
        if name not in names:
            names.append(name)
    return names


class TargetPlanner:
    """Owns StudyTargets, one per calendar day.

    ``catalog`` is only consulted when ``validate_references`` is on; the two
    stores are otherwise independent.
    """

    def __init__(
        self,
        store: Store,
        catalog: Catalog | None = None,
        validate_references: bool = False,
        tz: tzinfo | None = None,
    ):
        if validate_references and catalog is None:
            raise ValueError("validate_references requires a catalog")
        self.store = store
        self.catalog = catalog
        self.validate_references = validate_references
        self.tz = tz

    def _to_schema(self, target: models.StudyTarget) -> schemas.StudyTarget:
        return schemas.StudyTarget(
            date=target.day,
            timestamp=day_to_timestamp(target.day, self.tz),
            subjects=list(target.subjects),
            chapters=[tuple(pair) for pair in target.chapters],
            isComplete=target.is_complete,
        )

    def _load(self, db: Session, day: date) -> models.StudyTarget:
        target = db.get(models.StudyTarget, day)
        if target is None:
            raise TargetNotFound(day)
        return target

    def set_study_target(
        self,
        day,
        subjects: Sequence[str] | None,
        chapters: Iterable[Sequence[str]],
    ) -> schemas.StudyTarget:
        """Create or replace the target for ``day``; it always starts incomplete."""
        day = to_day(day, self.tz)
        pairs = _normalize_chapters(chapters)
        derived = subjects_of(pairs)
        if subjects is None:
            stored_subjects = derived
        else:
            stored_subjects = _normalize_subjects(subjects)
            if set(stored_subjects) != set(derived):
                raise InvalidArgument(
                    f"Subjects {sorted(stored_subjects)} do not match the chapters' subjects {sorted(derived)}"
                )

        if self.validate_references:
            for subject, chapter in pairs:
                self.catalog.require_chapter(subject, chapter)

        with self.store.write() as db:
            target = db.get(models.StudyTarget, day)
            data = {
                "subjects": stored_subjects,
                "chapters": [list(pair) for pair in pairs],
                "is_complete": False,
            }
            if target:
                for key, value in data.items():
                    setattr(target, key, value)
            else:
                target = models.StudyTarget(day=day, **data)
                db.add(target)
            db.flush()
            stored = self._to_schema(target)

        logger.info("planner.target_set", day=day.isoformat(), subjects=stored_subjects, chapters=len(pairs))
        return stored

    def complete_study_target(self, day) -> None:
        day = to_day(day, self.tz)
        with self.store.write() as db:
            self._load(db, day).is_complete = True
        logger.info("planner.target_completed", day=day.isoformat())

    def get_study_target(self, day) -> schemas.StudyTarget:
        day = to_day(day, self.tz)
        with self.store.session() as db:
            return self._to_schema(self._load(db, day))

    def find_study_target(self, day) -> schemas.StudyTarget | None:
        """Like ``get_study_target`` but ``None`` when the day has no target."""
        try:
            return self.get_study_target(day)
        except TargetNotFound:
            return None

    def get_study_targets_in_range(self, start, end) -> list[schemas.StudyTarget]:
        """Targets with ``start <= day <= end``, oldest first."""
        start, end = to_day(start, self.tz), to_day(end, self.tz)
        if start > end:
            return []
        with self.store.session() as db:
            targets = (
                db.query(models.StudyTarget)
                .filter(models.StudyTarget.day >= start, models.StudyTarget.day <= end)
                .order_by(models.StudyTarget.day)
                .all()
            )
            return [self._to_schema(t) for t in targets]
