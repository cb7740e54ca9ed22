"""Display progress, computed from the catalog's live chapter flags."""

from __future__ import annotations

from typing import Iterable

import schemas


def percent(completed: int, total: int) -> int:
    if total == 0:
        return 0
    # round half up: 1 of 8 is 13%
    return (completed * 200 + total) // (total * 2)


def subject_progress(subject: schemas.Subject) -> schemas.SubjectProgress:
    completed = sum(1 for c in subject.chapters if c.isComplete)
    total = len(subject.chapters)
    return schemas.SubjectProgress(
        subject=subject.name, total=total, completed=completed, percent=percent(completed, total)
    )


def completion_index(subjects: Iterable[schemas.Subject]) -> dict[tuple[str, str], bool]:
    return {(s.name, c.name): c.isComplete for s in subjects for c in s.chapters}


def group_chapters_by_subject(target: schemas.StudyTarget) -> dict[str, list[str]]:
    groups: dict[str, list[str]] = {}
    for subject, chapter in target.chapters:
        groups.setdefault(subject, []).append(chapter)
    return groups


def target_progress(
    target: schemas.StudyTarget, subjects: Iterable[schemas.Subject]
) -> schemas.TargetProgress:
    """How much of ``target`` is done according to the catalog.

    Every chapter entry counts, duplicates included; entries naming a chapter
    the catalog does not know count as not done. The target's own
    ``isComplete`` flag is reported alongside but never folded in.
    """
    done = completion_index(subjects)
    completed = sum(1 for pair in target.chapters if done.get(tuple(pair), False))
    total = len(target.chapters)
    groups = [
        schemas.SubjectGroup(
            subject=subject,
            chapters=[
                schemas.ChapterStatus(name=name, isComplete=done.get((subject, name), False))
                for name in names
            ],
        )
        for subject, names in group_chapters_by_subject(target).items()
    ]
    return schemas.TargetProgress(
        date=target.date,
        isComplete=target.isComplete,
        total=total,
        completed=completed,
        percent=percent(completed, total),
        groups=groups,
    )
