from datetime import date as Date
from pydantic import BaseModel, Field
from typing import List, Optional, Tuple

# CHAPTERS
class ChapterBase(BaseModel):
    name: str = Field(min_length=1)
    totalPages: int = Field(ge=0, strict=True)

class ChapterCreate(ChapterBase):
    pass

class Chapter(ChapterBase):
    isComplete: bool = False

# SUBJECTS
class SubjectCreate(BaseModel):
    name: str = Field(min_length=1)

class Subject(BaseModel):
    name: str
    chapters: List[Chapter] = []

# STUDY TARGETS
class StudyTargetSet(BaseModel):
    subjects: Optional[List[str]] = None
    chapters: List[Tuple[str, str]] = []

class StudyTarget(BaseModel):
    date: Date
    timestamp: int # nanoseconds at midnight of `date`
    subjects: List[str]
    chapters: List[Tuple[str, str]]
    isComplete: bool = False

# PROGRESS
class Progress(BaseModel):
    total: int
    completed: int
    percent: int

class SubjectProgress(Progress):
    subject: str

class ChapterStatus(BaseModel):
    name: str
    isComplete: bool

class SubjectGroup(BaseModel):
    subject: str
    chapters: List[ChapterStatus]

class TargetProgress(Progress):
    date: Date
    isComplete: bool
    groups: List[SubjectGroup]

class Message(BaseModel):
    message: str
