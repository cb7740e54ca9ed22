from fastapi import status


class StudyTrackerError(Exception):
    """Base class for expected, caller-facing failures."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__


class DuplicateSubject(StudyTrackerError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, name: str):
        super().__init__(f"Subject '{name}' already exists")
        self.name = name


class DuplicateChapter(StudyTrackerError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, subject_name: str, chapter_name: str):
        super().__init__(f"Chapter '{chapter_name}' already exists in subject '{subject_name}'")
        self.subject_name = subject_name
        self.chapter_name = chapter_name


class SubjectNotFound(StudyTrackerError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, name: str):
        super().__init__(f"Subject '{name}' not found")
        self.name = name


class ChapterNotFound(StudyTrackerError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, subject_name: str, chapter_name: str):
        super().__init__(f"Chapter '{chapter_name}' not found in subject '{subject_name}'")
        self.subject_name = subject_name
        self.chapter_name = chapter_name


class TargetNotFound(StudyTrackerError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, day):
        super().__init__(f"No study target for {day.isoformat()}")
        self.day = day


class InvalidArgument(StudyTrackerError):
    status_code = 422
