"""Assignment model."""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Integer, Float
from sqlalchemy.orm import relationship
import uuid

from ..database import Base
from ..utils import utcnow


class Assignment(Base):
    """Assignment model."""
    __tablename__ = "assignments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text)
    course_id = Column(String(36), ForeignKey("courses.id"), index=True)
    lesson_id = Column(String(36), ForeignKey("lessons.id"), nullable=True)
    due_date = Column(DateTime, nullable=True)
    max_points = Column(Float, nullable=False, default=100)
    grade_category = Column(String(100), nullable=True)
    rubric_id = Column(String(36), ForeignKey("rubrics.id"), nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    course = relationship("Course", back_populates="assignments")
    lesson = relationship("Lesson")
    rubric = relationship("Rubric", back_populates="assignments")
    created_by_user = relationship("User")
    submissions = relationship("Submission", back_populates="assignment", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Assignment(id={self.id}, title='{self.title}')>"
