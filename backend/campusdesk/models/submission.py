"""Submission and rubric score models."""

from sqlalchemy import (
    Column, String, Text, DateTime, ForeignKey, Enum as SQLEnum, Integer, Float, UniqueConstraint,
)
from sqlalchemy.orm import relationship
import uuid

from ..database import Base
from ..utils import utcnow
from .enums import SubmissionStatus


class Submission(Base):
    """A student's attempt at an assignment.

    ``grade`` stays null until the submission is graded, either from rubric
    scores or by direct entry.
    """
    __tablename__ = "submissions"
    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    assignment_id = Column(String(36), ForeignKey("assignments.id"), nullable=False, index=True)
    student_id = Column(String(36), ForeignKey("student_profiles.id"), nullable=False, index=True)
    status = Column(SQLEnum(SubmissionStatus), nullable=False, default=SubmissionStatus.draft)
    content = Column(Text)
    grade = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)
    graded_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    graded_at = Column(DateTime, nullable=True)
    submitted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    assignment = relationship("Assignment", back_populates="submissions")
    student = relationship("StudentProfile")
    grader = relationship("User")
    rubric_scores = relationship("RubricScore", back_populates="submission", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Submission(id={self.id}, status={self.status})>"

    @property
    def is_graded(self):
        return self.status == SubmissionStatus.graded


class RubricScore(Base):
    """Clamped score for one criterion on one submission."""
    __tablename__ = "rubric_scores"
    __table_args__ = (
        UniqueConstraint("criterion_id", "submission_id", name="uq_rubric_score_criterion_submission"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    criterion_id = Column(String(36), ForeignKey("rubric_criteria.id", ondelete="CASCADE"), nullable=False)
    submission_id = Column(String(36), ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False)
    score = Column(Float, nullable=False)
    comment = Column(Text, nullable=True)

    criterion = relationship("RubricCriterion", back_populates="scores")
    submission = relationship("Submission", back_populates="rubric_scores")

    def __repr__(self):
        return f"<RubricScore(criterion_id={self.criterion_id}, score={self.score})>"
