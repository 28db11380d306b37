"""Quiz attempt bodies."""
from datetime import datetime
from typing import Optional

from campusdesk.schemas import CamelModel


class QuizAttemptOut(CamelModel):
    id: str
    quiz_id: str
    student_id: str
    started_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None
    score: Optional[float] = None
    points_earned: Optional[float] = None
    points_total: Optional[float] = None
    is_passing: Optional[bool] = None
    time_spent: Optional[int] = None


class StartAttemptResponse(CamelModel):
    attempt: QuizAttemptOut
    resumed: bool


class SubmitAttemptRequest(CamelModel):
    attempt_id: str
    # question id -> raw answer; multiple choice answers are JSON lists of option texts
    answers: dict[str, Optional[str]]


class QuizResults(CamelModel):
    score: float
    passed: bool
    total_points: float
    earned_points: float


class SubmitAttemptResponse(CamelModel):
    success: bool = True
    attempt: QuizAttemptOut
    results: QuizResults
