"""Test cases for course grade calculation."""

from types import SimpleNamespace

import pytest

from campusdesk.errors import NotFoundError
from campusdesk.grading import GradingService, calculate_grade
from campusdesk.grading.gradebook import letter_for
from campusdesk.models import (
    Assignment, QuestionType, Quiz, QuizAttempt, QuizQuestion, Submission, SubmissionStatus,
)
from campusdesk.utils import utcnow

SCALE = [
    {"label": "A", "min": 90},
    {"label": "B", "min": 80},
    {"label": "C", "min": 70},
    {"label": "D", "min": 60},
    {"label": "F", "min": 50},
]


def assignment(id, max_points=100, category=None):
    return SimpleNamespace(id=id, max_points=max_points, grade_category=category)


def graded(assignment_id, grade, status=SubmissionStatus.graded):
    return SimpleNamespace(assignment_id=assignment_id, grade=grade, status=status)


def quiz(id, category=None):
    return SimpleNamespace(id=id, grade_category=category)


def attempt(quiz_id, points):
    return SimpleNamespace(quiz_id=quiz_id, points_earned=points)


class TestLetterFor:
    """Test cases for letter_for."""

    @pytest.mark.parametrize("percentage, letter", [
        (95, "A"), (90, "A"), (89.9, "B"), (70, "C"), (61, "D"), (50, "F"),
    ])
    def test_bands(self, percentage, letter):
        assert letter_for(percentage, SCALE) == letter

    def test_below_every_band_gets_lowest(self):
        assert letter_for(12, SCALE) == "F"

    @pytest.mark.parametrize("scale", [None, []])
    def test_no_scale(self, scale):
        assert letter_for(88, scale) == "N/A"


class TestCalculateGrade:
    """Test cases for calculate_grade."""

    def test_unweighted_average(self):
        result = calculate_grade(
            None, SCALE,
            [assignment("a1"), assignment("a2")],
            [], [graded("a1", 80), graded("a2", 90)], [], {},
        )

        assert result.percentage == 85.0
        assert result.letter_grade == "B"
        assert result.is_weighted is False

    def test_ungraded_work_is_ignored(self):
        result = calculate_grade(
            None, SCALE,
            [assignment("a1"), assignment("a2"), assignment("a3")],
            [],
            [
                graded("a1", 90),
                graded("a2", 40, status=SubmissionStatus.submitted),
                graded("a3", None),
            ],
            [], {},
        )
        assert result.percentage == 90.0

    def test_weighted_categories(self):
        result = calculate_grade(
            {"homework": 0.4, "exams": 0.6}, SCALE,
            [assignment("hw", 50, "homework"), assignment("exam", 100, "exams")],
            [], [graded("hw", 45), graded("exam", 70)], [], {},
        )

        # 90% * 0.4 + 70% * 0.6
        assert result.percentage == 78.0
        assert result.letter_grade == "C"
        assert result.is_weighted is True

    def test_empty_categories_drop_out_of_the_weighting(self):
        result = calculate_grade(
            {"homework": 0.4, "exams": 0.6}, SCALE,
            [assignment("hw", 50, "homework"), assignment("exam", 100, "exams")],
            [], [graded("hw", 45)], [], {},
        )
        assert result.percentage == 90.0

    def test_best_quiz_attempt_counts(self):
        result = calculate_grade(
            None, SCALE,
            [], [quiz("q1")], [],
            [attempt("q1", 3), attempt("q1", 8), attempt("q1", 5)],
            {"q1": 10},
        )
        assert result.percentage == 80.0

    def test_unattempted_quiz_is_ignored(self):
        result = calculate_grade(
            None, SCALE,
            [assignment("a1")], [quiz("q1")], [graded("a1", 75)], [], {"q1": 10},
        )
        assert result.percentage == 75.0

    def test_rounds_to_one_decimal(self):
        result = calculate_grade(
            None, None,
            [assignment("a1", 3)], [], [graded("a1", 2)], [], {},
        )
        assert result.percentage == 66.7
        assert result.letter_grade == "N/A"

    def test_nothing_graded(self):
        result = calculate_grade(None, SCALE, [assignment("a1")], [], [], [], {})
        assert result.percentage == 0.0
        assert result.letter_grade == "F"


class TestCourseGrade:
    """Test cases for GradingService.course_grade against the database."""

    def test_course_grade(self, db_session, course, student):
        course.grading_scale = SCALE
        homework = Assignment(title="Homework", course_id=course.id, max_points=20)
        db_session.add(homework)
        db_session.flush()
        db_session.add(Submission(
            assignment_id=homework.id, student_id=student.id,
            status=SubmissionStatus.graded, grade=17,
        ))

        checkpoint = Quiz(course_id=course.id, title="Checkpoint", is_published=True, questions=[
            QuizQuestion(question_type=QuestionType.true_false, prompt="Q1", correct_answer="true", points=5),
            QuizQuestion(question_type=QuestionType.true_false, prompt="Q2", correct_answer="false", points=5),
        ])
        db_session.add(checkpoint)
        db_session.flush()
        db_session.add(QuizAttempt(
            quiz_id=checkpoint.id, student_id=student.id, submitted_at=utcnow(), points_earned=10,
        ))
        db_session.commit()

        result = GradingService(db_session).course_grade(student.id, course.id)

        # (17 + 10) / (20 + 10)
        assert result.percentage == 90.0
        assert result.letter_grade == "A"

    def test_unsubmitted_attempts_do_not_count(self, db_session, course, student):
        checkpoint = Quiz(course_id=course.id, title="Checkpoint", is_published=True, questions=[
            QuizQuestion(question_type=QuestionType.essay, prompt="Explain PWM", points=10),
        ])
        db_session.add(checkpoint)
        db_session.flush()
        db_session.add(QuizAttempt(quiz_id=checkpoint.id, student_id=student.id, points_earned=10))
        db_session.commit()

        result = GradingService(db_session).course_grade(student.id, course.id)
        assert result.percentage == 0.0

    def test_unknown_course(self, db_session, student):
        with pytest.raises(NotFoundError):
            GradingService(db_session).course_grade(student.id, "missing")
