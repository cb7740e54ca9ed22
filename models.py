from sqlalchemy import Column, Integer, String, Boolean, Date, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base

class Subject(Base):
    __tablename__ = "subjects"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)

    chapters = relationship(
        "Chapter", back_populates="subject", order_by="Chapter.position", cascade="all, delete-orphan"
    )

class Chapter(Base):
    __tablename__ = "chapters"
    __table_args__ = (UniqueConstraint("subject_id", "name", name="uq_chapter_subject_name"),)

    id = Column(Integer, primary_key=True, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)
    position = Column(Integer, nullable=False) # insertion order within the subject
    name = Column(String, nullable=False)
    total_pages = Column(Integer, nullable=False, default=0)
    is_complete = Column(Boolean, nullable=False, default=False)

    subject = relationship("Subject", back_populates="chapters")

class StudyTarget(Base):
    __tablename__ = "study_targets"
    day = Column(Date, primary_key=True)
    subjects = Column(JSON, nullable=False) # ["Math", ...]
    chapters = Column(JSON, nullable=False) # [["Math", "Ch1"], ...]
    is_complete = Column(Boolean, nullable=False, default=False)
