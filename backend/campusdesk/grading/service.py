"""Grading of submissions, rubric management and course grades."""
import logging
from typing import Optional, Sequence

from sqlalchemy.orm import Session, selectinload

from campusdesk.errors import InvalidInputError, NotFoundError
from campusdesk.models import (
    Assignment, Course, Quiz, QuizAttempt, Rubric, RubricCriterion, RubricScore,
    Submission, SubmissionStatus,
)
from campusdesk.utils import utcnow
from .gradebook import GradeResult, calculate_grade
from .schemas import CriterionIn, CriterionScoreIn, RubricCreate, RubricUpdate

logger = logging.getLogger(__name__)


def clamp_score(score: float, max_points: float) -> float:
    """Clamp a criterion score into ``[0, max_points]``."""
    return max(0.0, min(float(score), max_points))


class GradingService:
    def __init__(self, db: Session):
        self.db = db

    def _get_submission(self, submission_id: str, assignment_id: Optional[str] = None) -> Submission:
        submission = self.db.get(Submission, submission_id)
        if submission is None or (assignment_id is not None and submission.assignment_id != assignment_id):
            raise NotFoundError("Submission not found")
        return submission

    def submit_rubric_grades(
        self,
        assignment_id: str,
        submission_id: Optional[str],
        scores: Optional[Sequence[CriterionScoreIn]],
        feedback: Optional[str] = None,
        grader_id: Optional[int] = None,
    ) -> float:
        """Score a submission against its assignment's rubric and return the total.

        Scores are clamped to each criterion's maximum and upserted per
        (criterion, submission), so repeating a request recomputes the same
        total. Entries for criteria that are not on the rubric are ignored.
        """
        if not submission_id:
            raise InvalidInputError("Submission ID is required")
        if not scores:
            raise InvalidInputError("Scores are required")

        submission = self._get_submission(submission_id, assignment_id)
        rubric = submission.assignment.rubric
        if rubric is None:
            raise InvalidInputError("Assignment does not have a rubric")

        existing = {row.criterion_id: row for row in submission.rubric_scores}
        total = 0.0
        for entry in scores:
            criterion = rubric.get_criterion(entry.criterion_id)
            if criterion is None:
                logger.debug(f"Ignoring score for unknown criterion {entry.criterion_id}")
                continue

            clamped = clamp_score(entry.score, criterion.max_points)
            total += clamped

            row = existing.get(criterion.id)
            if row is None:
                row = RubricScore(criterion_id=criterion.id, submission_id=submission.id)
                submission.rubric_scores.append(row)
                existing[criterion.id] = row
            row.score = clamped
            row.comment = entry.comment or None

        submission.grade = total
        submission.status = SubmissionStatus.graded
        submission.graded_at = utcnow()
        if grader_id is not None:
            submission.graded_by = grader_id
        if feedback:
            submission.feedback = feedback

        self.db.commit()
        logger.info(f"Rubric-graded submission {submission.id}: total {total}")
        return total

    def grade_submission(
        self,
        submission_id: str,
        grader_id: int,
        grade: Optional[float] = None,
        feedback: Optional[str] = None,
        assignment_id: Optional[str] = None,
    ) -> Submission:
        """Set a grade directly. A missing grade clears it; no clamping is applied."""
        submission = self._get_submission(submission_id, assignment_id)

        submission.grade = float(grade) if grade is not None else None
        if feedback is not None:
            submission.feedback = feedback
        submission.status = SubmissionStatus.graded
        submission.graded_at = utcnow()
        submission.graded_by = grader_id

        self.db.commit()
        self.db.refresh(submission)
        logger.info(f"Graded submission {submission.id}: {submission.grade}")
        return submission

    def course_grade(self, student_id: str, course_id: str) -> GradeResult:
        """Current weighted (or unweighted) grade of a student in a course."""
        course = self.db.get(Course, course_id)
        if course is None:
            raise NotFoundError("Course not found")

        assignments = self.db.query(Assignment).filter(Assignment.course_id == course_id).all()
        quizzes = (
            self.db.query(Quiz)
            .options(selectinload(Quiz.questions))
            .filter(Quiz.course_id == course_id, Quiz.is_published.is_(True))
            .all()
        )
        submissions = (
            self.db.query(Submission)
            .filter(
                Submission.student_id == student_id,
                Submission.assignment_id.in_([a.id for a in assignments]),
                Submission.status == SubmissionStatus.graded,
            )
            .all()
        )
        attempts = (
            self.db.query(QuizAttempt)
            .filter(
                QuizAttempt.student_id == student_id,
                QuizAttempt.quiz_id.in_([q.id for q in quizzes]),
                QuizAttempt.submitted_at.is_not(None),
            )
            .all()
        )

        return calculate_grade(
            course.grading_weights,
            course.grading_scale,
            assignments,
            quizzes,
            submissions,
            attempts,
            {quiz.id: quiz.total_points for quiz in quizzes},
        )


class RubricService:
    def __init__(self, db: Session):
        self.db = db

    def list_rubrics(self) -> list[Rubric]:
        return self.db.query(Rubric).order_by(Rubric.created_at.desc()).all()

    def get_rubric(self, rubric_id: str) -> Rubric:
        rubric = self.db.get(Rubric, rubric_id)
        if rubric is None:
            raise NotFoundError("Rubric not found")
        return rubric

    @staticmethod
    def _build_criteria(criteria: Sequence[CriterionIn]) -> list[RubricCriterion]:
        return [
            RubricCriterion(
                title=c.title,
                description=c.description or None,
                max_points=c.max_points,
                order=index,
            )
            for index, c in enumerate(criteria)
        ]

    def create_rubric(self, data: RubricCreate, created_by: Optional[int] = None) -> Rubric:
        rubric = Rubric(
            title=data.title,
            description=data.description or None,
            created_by=created_by,
            criteria=self._build_criteria(data.criteria),
        )
        self.db.add(rubric)
        self.db.commit()
        self.db.refresh(rubric)
        logger.info(f"Created rubric {rubric.id} with {rubric.criterion_count} criteria")
        return rubric

    def update_rubric(self, rubric_id: str, patch: RubricUpdate) -> Rubric:
        """Apply the fields present in ``patch``; a criteria list replaces the old one."""
        rubric = self.get_rubric(rubric_id)
        provided = patch.model_fields_set

        if "title" in provided and patch.title is not None:
            rubric.title = patch.title
        if "description" in provided:
            rubric.description = patch.description
        if "criteria" in provided and patch.criteria is not None:
            rubric.criteria = self._build_criteria(patch.criteria)

        self.db.commit()
        self.db.refresh(rubric)
        return rubric

    def delete_rubric(self, rubric_id: str) -> None:
        rubric = self.get_rubric(rubric_id)
        for assignment in rubric.assignments:
            assignment.rubric_id = None
        self.db.delete(rubric)
        self.db.commit()
        logger.info(f"Deleted rubric {rubric_id}")
