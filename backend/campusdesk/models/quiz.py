"""Quiz, question, attempt and answer models."""

from sqlalchemy import (
    Column, String, Text, DateTime, ForeignKey, Enum as SQLEnum, Integer, Float, Boolean, JSON,
)
from sqlalchemy.orm import relationship
import uuid

from ..database import Base
from ..utils import utcnow
from .enums import QuestionType


class Quiz(Base):
    __tablename__ = "quizzes"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    course_id = Column(String(36), ForeignKey("courses.id"), index=True)
    title = Column(String(255), nullable=False)
    passing_score = Column(Float, default=0)
    max_attempts = Column(Integer, nullable=True)
    grade_category = Column(String(100), nullable=True)
    is_published = Column(Boolean, default=False)
    created_at = Column(DateTime, default=utcnow)

    course = relationship("Course", back_populates="quizzes")
    questions = relationship("QuizQuestion", back_populates="quiz", order_by="QuizQuestion.order",
                             cascade="all, delete-orphan")
    attempts = relationship("QuizAttempt", back_populates="quiz", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Quiz(id={self.id}, title='{self.title}')>"

    @property
    def total_points(self):
        return sum(question.points for question in self.questions)


class QuizQuestion(Base):
    """A question. Multiple choice ``options`` look like ``[{"text": "A", "isCorrect": true}]``."""
    __tablename__ = "quiz_questions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    quiz_id = Column(String(36), ForeignKey("quizzes.id"), nullable=False, index=True)
    question_type = Column(SQLEnum(QuestionType), nullable=False)
    prompt = Column(Text, nullable=False)
    options = Column(JSON, nullable=True)
    correct_answer = Column(Text, nullable=True)
    points = Column(Float, nullable=False, default=1)
    order = Column(Integer, default=0)

    quiz = relationship("Quiz", back_populates="questions")


class QuizAttempt(Base):
    __tablename__ = "quiz_attempts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    quiz_id = Column(String(36), ForeignKey("quizzes.id"), nullable=False, index=True)
    student_id = Column(String(36), ForeignKey("student_profiles.id"), nullable=False, index=True)
    started_at = Column(DateTime, default=utcnow)
    submitted_at = Column(DateTime, nullable=True)
    score = Column(Float, nullable=True)
    points_earned = Column(Float, nullable=True)
    points_total = Column(Float, nullable=True)
    is_passing = Column(Boolean, nullable=True)
    time_spent = Column(Integer, nullable=True)

    quiz = relationship("Quiz", back_populates="attempts")
    student = relationship("StudentProfile")
    answers = relationship("QuizAnswer", back_populates="attempt", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<QuizAttempt(id={self.id}, quiz_id={self.quiz_id})>"

    @property
    def is_submitted(self) -> bool:
        return self.submitted_at is not None


class QuizAnswer(Base):
    """Graded answer; ``is_correct`` is null while an essay awaits manual grading."""
    __tablename__ = "quiz_answers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    attempt_id = Column(String(36), ForeignKey("quiz_attempts.id"), nullable=False, index=True)
    question_id = Column(String(36), ForeignKey("quiz_questions.id"), nullable=False)
    answer = Column(Text, nullable=True)
    is_correct = Column(Boolean, nullable=True)
    points_earned = Column(Float, default=0)

    attempt = relationship("QuizAttempt", back_populates="answers")
    question = relationship("QuizQuestion")
