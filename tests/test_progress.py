from datetime import date

import schemas
from progress import group_chapters_by_subject, percent, subject_progress, target_progress


def _target(chapters, is_complete=False):
    subjects = list(dict.fromkeys(s for s, _ in chapters))
    return schemas.StudyTarget(
        date=date(2026, 10, 17), timestamp=0, subjects=subjects, chapters=chapters, isComplete=is_complete
    )


def test_percent_rounds_half_up():
    assert percent(0, 0) == 0
    assert percent(1, 8) == 13
    assert percent(1, 3) == 33
    assert percent(2, 3) == 67
    assert percent(4, 4) == 100


def test_subject_progress(catalog):
    catalog.add_subject("Math")
    for name in ["Ch1", "Ch2", "Ch3"]:
        catalog.add_chapter("Math", name, 10)
    catalog.complete_chapter("Math", "Ch2")

    progress = subject_progress(catalog.get_subject("Math"))
    assert (progress.subject, progress.total, progress.completed, progress.percent) == ("Math", 3, 1, 33)


def test_subject_progress_without_chapters():
    progress = subject_progress(schemas.Subject(name="Art"))
    assert progress.percent == 0
    assert progress.total == 0


def test_group_chapters_by_subject():
    target = _target([("Math", "Ch1"), ("Art", "Colour"), ("Math", "Ch2")])
    assert group_chapters_by_subject(target) == {"Math": ["Ch1", "Ch2"], "Art": ["Colour"]}


def test_target_progress_uses_live_chapter_flags(catalog):
    catalog.add_subject("Math")
    catalog.add_chapter("Math", "Ch1", 50)
    catalog.add_chapter("Math", "Ch2", 40)
    catalog.complete_chapter("Math", "Ch1")
    target = _target([("Math", "Ch1"), ("Math", "Ch2"), ("Ghost", "Missing"), ("Math", "Ch1")])

    progress = target_progress(target, catalog.get_all_subjects())

    assert progress.total == 4
    assert progress.completed == 2
    assert progress.percent == 50
    assert progress.isComplete is False
    assert [g.subject for g in progress.groups] == ["Math", "Ghost"]
    assert [(c.name, c.isComplete) for c in progress.groups[0].chapters] == [
        ("Ch1", True),
        ("Ch2", False),
        ("Ch1", True),
    ]


def test_target_flag_not_folded_into_percent():
    progress = target_progress(_target([("Math", "Ch1")], is_complete=True), [])
    assert progress.isComplete is True
    assert progress.percent == 0


def test_empty_target_progress():
    progress = target_progress(_target([]), [])
    assert progress.percent == 0
    assert progress.groups == []
