"""Quiz attempts and automatic answer grading."""
import json
import logging
from typing import Mapping, Optional

from sqlalchemy.orm import Session

from campusdesk.errors import ForbiddenError, InvalidInputError, NotFoundError
from campusdesk.models import Quiz, QuizAnswer, QuizAttempt, QuizQuestion, QuestionType
from campusdesk.utils import utcnow
from .schemas import QuizResults

logger = logging.getLogger(__name__)


def _normalize(text: str) -> str:
    return text.strip().lower()


def grade_answer(question: QuizQuestion, answer: Optional[str]) -> tuple[Optional[bool], float]:
    """Return ``(is_correct, points)`` for one answer.

    Essays return ``(None, 0)`` until graded by hand.
    """
    if question.question_type == QuestionType.essay:
        return None, 0.0
    if not answer:
        return False, 0.0

    correct = False
    if question.question_type == QuestionType.multiple_choice:
        try:
            selected = json.loads(answer)
        except ValueError:
            logger.warning(f"Unparseable multiple choice answer for question {question.id}")
            selected = None
        if (
            isinstance(selected, list)
            and all(isinstance(text, str) for text in selected)
            and isinstance(question.options, list)
        ):
            expected = {o.get("text") for o in question.options if o.get("isCorrect")}
            correct = set(selected) == expected
    elif question.question_type == QuestionType.true_false:
        correct = bool(question.correct_answer) and _normalize(answer) == _normalize(question.correct_answer)
    elif question.question_type == QuestionType.short_answer:
        if question.correct_answer:
            acceptable = {_normalize(a) for a in question.correct_answer.split(",")}
            correct = _normalize(answer) in acceptable

    return correct, (question.points if correct else 0.0)


class QuizService:
    def __init__(self, db: Session):
        self.db = db

    def start_attempt(self, quiz_id: str, student_id: str) -> tuple[QuizAttempt, bool]:
        """Start a new attempt, or resume the unfinished one. Returns ``(attempt, resumed)``."""
        quiz = self.db.get(Quiz, quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz not found")

        attempts = [a for a in quiz.attempts if a.student_id == student_id]
        for attempt in attempts:
            if not attempt.is_submitted:
                return attempt, True

        # Resuming never counts against the limit, only opening a new attempt does
        if quiz.max_attempts and len(attempts) >= quiz.max_attempts:
            raise ForbiddenError("Maximum attempts reached")

        attempt = QuizAttempt(quiz_id=quiz.id, student_id=student_id, started_at=utcnow())
        self.db.add(attempt)
        self.db.commit()
        self.db.refresh(attempt)
        return attempt, False

    def submit_attempt(
        self,
        quiz_id: str,
        attempt_id: str,
        student_id: str,
        answers: Mapping[str, Optional[str]],
    ) -> tuple[QuizAttempt, QuizResults]:
        attempt = self.db.get(QuizAttempt, attempt_id)
        if attempt is None or attempt.quiz_id != quiz_id:
            raise NotFoundError("Attempt not found")
        if attempt.student_id != student_id:
            raise ForbiddenError("Unauthorized attempt access")
        if attempt.is_submitted:
            raise InvalidInputError("Attempt already submitted")

        now = utcnow()
        earned = possible = 0.0
        graded: list[QuizAnswer] = []
        for question in attempt.quiz.questions:
            answer = answers.get(question.id)
            is_correct, points = grade_answer(question, answer)
            possible += question.points
            earned += points
            graded.append(QuizAnswer(
                question_id=question.id,
                answer=answer,
                is_correct=is_correct,
                points_earned=points,
            ))

        # Replace earlier answers so a retried submit stays consistent
        attempt.answers = graded

        score = (earned / possible) * 100 if possible > 0 else 0.0
        attempt.submitted_at = now
        attempt.score = score
        attempt.points_earned = earned
        attempt.points_total = possible
        attempt.is_passing = score >= (attempt.quiz.passing_score or 0)
        attempt.time_spent = int((now - attempt.started_at).total_seconds()) if attempt.started_at else 0

        self.db.commit()
        self.db.refresh(attempt)
        logger.info(f"Attempt {attempt.id} submitted: {earned}/{possible}")
        return attempt, QuizResults(
            score=score,
            passed=attempt.is_passing,
            total_points=possible,
            earned_points=earned,
        )
