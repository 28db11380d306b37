"""Quiz attempts and auto-grading."""
from .service import QuizService, grade_answer
from .router import router as quizzes_router

__all__ = ['QuizService', 'grade_answer', 'quizzes_router']
