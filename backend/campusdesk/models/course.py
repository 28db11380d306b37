"""Course, Module and Lesson models."""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Integer, Boolean, JSON
from sqlalchemy.orm import relationship
import uuid

from ..database import Base
from ..utils import utcnow


class Course(Base):
    """LMS course.

    ``grading_weights`` maps a grade category to its weight, e.g.
    ``{"homework": 0.4, "exams": 0.6}``; ``grading_scale`` is a list of
    ``{"label": "A", "min": 90}`` entries. Both are optional.
    """
    __tablename__ = "courses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    code = Column(String(50), unique=True, nullable=False)
    description = Column(Text)
    grading_weights = Column(JSON, nullable=True)
    grading_scale = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    modules = relationship("Module", back_populates="course", order_by="Module.order",
                           cascade="all, delete-orphan")
    lessons = relationship("Lesson", back_populates="course")
    assignments = relationship("Assignment", back_populates="course")
    quizzes = relationship("Quiz", back_populates="course")

    def __repr__(self):
        return f"<Course(id={self.id}, code='{self.code}')>"


class Module(Base):
    __tablename__ = "modules"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    course_id = Column(String(36), ForeignKey("courses.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    order = Column(Integer, default=0)
    is_published = Column(Boolean, default=False)

    course = relationship("Course", back_populates="modules")
    lessons = relationship("Lesson", back_populates="module", order_by="Lesson.order",
                           cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Module(id={self.id}, title='{self.title}')>"

    @property
    def published_lessons(self):
        return [lesson for lesson in self.lessons if lesson.is_published]


class Lesson(Base):
    """A lesson sits inside a module, or directly on a course."""
    __tablename__ = "lessons"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    module_id = Column(String(36), ForeignKey("modules.id"), nullable=True, index=True)
    course_id = Column(String(36), ForeignKey("courses.id"), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text)
    order = Column(Integer, default=0)
    is_published = Column(Boolean, default=False)

    module = relationship("Module", back_populates="lessons")
    course = relationship("Course", back_populates="lessons")
    progress_records = relationship("LessonProgress", back_populates="lesson",
                                    cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Lesson(id={self.id}, title='{self.title}')>"
