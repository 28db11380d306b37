"""Submission grading, rubrics and course grades."""
from .gradebook import GradeResult, calculate_grade
from .service import GradingService, RubricService, clamp_score
from .router import router as grading_router

__all__ = [
    'GradeResult',
    'calculate_grade',
    'GradingService',
    'RubricService',
    'clamp_score',
    'grading_router',
]
