"""Lesson progress model."""

from sqlalchemy import Column, String, DateTime, ForeignKey, Enum as SQLEnum, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid

from ..database import Base
from ..utils import utcnow
from .enums import ProgressStatus


class LessonProgress(Base):
    """One row per (lesson, student); ``completed_at`` is set iff status is completed."""
    __tablename__ = "lesson_progress"
    __table_args__ = (
        UniqueConstraint("lesson_id", "student_id", name="uq_lesson_progress_lesson_student"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    lesson_id = Column(String(36), ForeignKey("lessons.id"), nullable=False, index=True)
    student_id = Column(String(36), ForeignKey("student_profiles.id"), nullable=False, index=True)
    status = Column(SQLEnum(ProgressStatus), nullable=False, default=ProgressStatus.not_started)
    completed_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    lesson = relationship("Lesson", back_populates="progress_records")
    student = relationship("StudentProfile")

    def __repr__(self):
        return f"<LessonProgress(lesson_id={self.lesson_id}, student_id={self.student_id}, status={self.status})>"

    @property
    def is_completed(self) -> bool:
        return self.status == ProgressStatus.completed
