"""SQLAlchemy models for campusdesk."""

from .enums import (
    SubmissionStatus, ProgressStatus, RecurringFrequency, ExpenseStatus, QuestionType,
)
from .course import Course, Module, Lesson
from .progress import LessonProgress
from .rubric import Rubric, RubricCriterion, MAX_CRITERION_POINTS
from .assignment import Assignment
from .submission import Submission, RubricScore
from .quiz import Quiz, QuizQuestion, QuizAttempt, QuizAnswer
from .expense import Expense, OneOff, Recurring, Schedule

__all__ = [
    "SubmissionStatus",
    "ProgressStatus",
    "RecurringFrequency",
    "ExpenseStatus",
    "QuestionType",
    "Course",
    "Module",
    "Lesson",
    "LessonProgress",
    "Rubric",
    "RubricCriterion",
    "MAX_CRITERION_POINTS",
    "Assignment",
    "Submission",
    "RubricScore",
    "Quiz",
    "QuizQuestion",
    "QuizAttempt",
    "QuizAnswer",
    "Expense",
    "OneOff",
    "Recurring",
    "Schedule",
]
