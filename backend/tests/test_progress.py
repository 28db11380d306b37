"""Test cases for lesson progress tracking."""

import pytest

from campusdesk.errors import NotFoundError
from campusdesk.models import Course, Lesson, LessonProgress, ProgressStatus
from campusdesk.progress import ProgressService, progress_percentage


@pytest.fixture
def progress(db_session):
    return ProgressService(db_session)


@pytest.mark.parametrize("completed, total, expected", [
    (0, 0, 0),
    (0, 4, 0),
    (1, 4, 25),
    (3, 4, 75),
    (4, 4, 100),
    (1, 3, 33),
    (2, 3, 67),
    (1, 8, 13),
])
def test_progress_percentage(completed, total, expected):
    assert progress_percentage(completed, total) == expected


class TestCourseProgress:
    """Test cases for ProgressService.course_progress."""

    def test_no_progress_rows(self, progress, course, course_outline, student):
        result = progress.course_progress(student.id, course.id)

        assert result.progress.total == 4
        assert result.progress.completed == 0
        assert result.progress.percentage == 0
        assert [m.title for m in result.modules] == ["Foundations", "Motors"]
        assert all(lesson.progress is None for m in result.modules for lesson in m.lessons)

    def test_one_of_four_completed(self, progress, course, course_outline, student):
        progress.set_lesson_progress(student.id, course_outline["lessons"]["safety"].id, ProgressStatus.completed)

        result = progress.course_progress(student.id, course.id)

        assert result.progress.completed == 1
        assert result.progress.percentage == 25
        foundations = result.modules[0]
        assert foundations.percentage == 33
        assert foundations.lessons[0].progress.status == ProgressStatus.completed

    def test_in_progress_does_not_count(self, progress, course, course_outline, student):
        progress.set_lesson_progress(student.id, course_outline["lessons"]["tools"].id, ProgressStatus.in_progress)

        result = progress.course_progress(student.id, course.id)

        assert result.progress.completed == 0
        assert result.modules[0].lessons[1].progress.status == ProgressStatus.in_progress

    def test_unpublished_lessons_do_not_count(self, progress, course, course_outline, student):
        lessons = course_outline["lessons"]
        for key in ("draft", "servos", "dc_motors"):
            progress.set_lesson_progress(student.id, lessons[key].id, ProgressStatus.completed)

        result = progress.course_progress(student.id, course.id)

        assert result.progress.total == 4
        assert result.progress.completed == 1
        assert [lesson.title for lesson in result.modules[0].lessons] == ["Safety", "Tools", "Wiring"]

    def test_other_students_progress_is_separate(self, progress, course, course_outline, student, other_student):
        progress.set_lesson_progress(other_student.id, course_outline["lessons"]["safety"].id, ProgressStatus.completed)

        result = progress.course_progress(student.id, course.id)
        assert result.progress.completed == 0

    def test_course_without_modules(self, db_session, progress, student):
        empty = Course(name="Empty", code="EMPTY1")
        db_session.add(empty)
        db_session.commit()

        result = progress.course_progress(student.id, empty.id)

        assert result.modules == []
        assert result.progress.total == 0
        assert result.progress.percentage == 0


class TestModuleProgress:
    """Test cases for ProgressService.module_progress."""

    def test_module_percentage(self, progress, course_outline, student):
        lessons = course_outline["lessons"]
        progress.set_lesson_progress(student.id, lessons["safety"].id, ProgressStatus.completed)
        progress.set_lesson_progress(student.id, lessons["tools"].id, ProgressStatus.completed)
        progress.set_lesson_progress(student.id, lessons["draft"].id, ProgressStatus.completed)

        assert progress.module_progress(student.id, course_outline["foundations"].id) == 67
        assert progress.module_progress(student.id, course_outline["motors"].id) == 0


class TestSetLessonProgress:
    """Test cases for ProgressService.set_lesson_progress."""

    def test_completion_stamps_time(self, progress, course_outline, student):
        record = progress.set_lesson_progress(
            student.id, course_outline["lessons"]["safety"].id, ProgressStatus.completed
        )

        assert record.status == ProgressStatus.completed
        assert record.completed_at is not None

    def test_going_back_clears_completion(self, db_session, progress, course_outline, student):
        lesson_id = course_outline["lessons"]["safety"].id
        progress.set_lesson_progress(student.id, lesson_id, ProgressStatus.completed)
        record = progress.set_lesson_progress(student.id, lesson_id, ProgressStatus.in_progress)

        assert record.status == ProgressStatus.in_progress
        assert record.completed_at is None
        assert db_session.query(LessonProgress).filter_by(lesson_id=lesson_id).count() == 1

    def test_unknown_lesson(self, progress, student):
        with pytest.raises(NotFoundError) as exc_info:
            progress.set_lesson_progress(student.id, "missing", ProgressStatus.completed)
        assert exc_info.value.detail == "Lesson not found"

    def test_lesson_must_belong_to_course(self, db_session, progress, course, course_outline, student):
        other = Course(name="Chemistry", code="CHEM1")
        db_session.add(other)
        db_session.commit()
        lesson_id = course_outline["lessons"]["safety"].id

        with pytest.raises(NotFoundError):
            progress.set_lesson_progress(student.id, lesson_id, ProgressStatus.completed, course_id=other.id)
        assert db_session.query(LessonProgress).filter_by(lesson_id=lesson_id).count() == 0

        record = progress.set_lesson_progress(student.id, lesson_id, ProgressStatus.completed, course_id=course.id)
        assert record.completed_at is not None

    def test_lesson_directly_on_course(self, db_session, progress, course, student):
        lesson = Lesson(course_id=course.id, title="Welcome", is_published=True)
        db_session.add(lesson)
        db_session.commit()

        record = progress.set_lesson_progress(student.id, lesson.id, ProgressStatus.in_progress, course_id=course.id)
        assert record.status == ProgressStatus.in_progress
