"""Course grade calculation over graded submissions and quiz attempts."""
import math
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence

from campusdesk.models import SubmissionStatus


@dataclass
class GradeResult:
    percentage: float
    letter_grade: str
    is_weighted: bool


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _best_attempt_points(attempts: Iterable) -> Optional[float]:
    points = [attempt.points_earned or 0 for attempt in attempts]
    return max(points) if points else None


def _earned_and_possible(assignments, quizzes, submissions, attempts, quiz_max_points):
    """Sum earned and possible points; ungraded work and unattempted quizzes count for nothing."""
    graded = {
        s.assignment_id: s.grade
        for s in submissions
        if s.status == SubmissionStatus.graded and s.grade is not None
    }
    earned = possible = 0.0
    for assignment in assignments:
        if assignment.id in graded:
            earned += graded[assignment.id]
            possible += assignment.max_points
    for quiz in quizzes:
        best = _best_attempt_points(a for a in attempts if a.quiz_id == quiz.id)
        if best is not None:
            earned += best
            possible += quiz_max_points.get(quiz.id, 0)
    return earned, possible


def letter_for(percentage: float, scale: Optional[Sequence[Mapping]]) -> str:
    """Map a percentage onto a ``[{"label", "min"}]`` scale; below every band gets the lowest label."""
    if not scale:
        return "N/A"
    bands = sorted(scale, key=lambda band: band["min"], reverse=True)
    for band in bands:
        if percentage >= band["min"]:
            return band["label"]
    return bands[-1]["label"]


def calculate_grade(
    weights: Optional[Mapping[str, float]],
    scale: Optional[Sequence[Mapping]],
    assignments: Sequence,
    quizzes: Sequence,
    submissions: Sequence,
    attempts: Sequence,
    quiz_max_points: Mapping[str, float],
) -> GradeResult:
    total = 0.0
    if weights:
        used_weight = 0.0
        for category, weight in weights.items():
            earned, possible = _earned_and_possible(
                [a for a in assignments if a.grade_category == category],
                [q for q in quizzes if q.grade_category == category],
                submissions, attempts, quiz_max_points,
            )
            if possible > 0:
                total += (earned / possible) * 100 * weight
                used_weight += weight
        if used_weight > 0:
            total = total / used_weight
    else:
        earned, possible = _earned_and_possible(
            assignments, quizzes, submissions, attempts, quiz_max_points
        )
        if possible > 0:
            total = (earned / possible) * 100

    return GradeResult(
        percentage=_round_half_up(total, 1),
        letter_grade=letter_for(total, scale),
        is_weighted=bool(weights),
    )
