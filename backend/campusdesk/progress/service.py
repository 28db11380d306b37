"""Lesson completion tracking and course/module progress aggregation."""
import logging
import math
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from campusdesk.errors import NotFoundError
from campusdesk.models import Lesson, LessonProgress, Module, ProgressStatus
from campusdesk.utils import utcnow
from .schemas import (
    CourseProgress, LessonProgressOut, LessonWithProgress, ModuleWithProgress, ProgressSummary,
)

logger = logging.getLogger(__name__)


def progress_percentage(completed: int, total: int) -> int:
    """Whole-number completion percentage, halves rounded up; 0 when there is nothing to complete."""
    if total == 0:
        return 0
    return math.floor(completed * 100 / total + 0.5)


class ProgressService:
    def __init__(self, db: Session):
        self.db = db

    def _progress_by_lesson(self, student_id: str, lesson_ids: list[str]) -> dict[str, LessonProgress]:
        if not lesson_ids:
            return {}
        rows = (
            self.db.query(LessonProgress)
            .filter(
                LessonProgress.student_id == student_id,
                LessonProgress.lesson_id.in_(lesson_ids),
            )
            .all()
        )
        return {row.lesson_id: row for row in rows}

    def course_progress(self, student_id: str, course_id: str) -> CourseProgress:
        """Published modules and lessons of a course with the student's progress on each.

        Lessons without a progress row count as not completed.
        """
        modules = (
            self.db.query(Module)
            .options(selectinload(Module.lessons))
            .filter(Module.course_id == course_id, Module.is_published.is_(True))
            .order_by(Module.order)
            .all()
        )
        lesson_ids = [lesson.id for module in modules for lesson in module.published_lessons]
        progress = self._progress_by_lesson(student_id, lesson_ids)

        module_views = []
        total = completed = 0
        for module in modules:
            lessons = module.published_lessons
            done = sum(1 for lesson in lessons if lesson.id in progress and progress[lesson.id].is_completed)
            total += len(lessons)
            completed += done
            module_views.append(ModuleWithProgress(
                id=module.id,
                title=module.title,
                order=module.order,
                percentage=progress_percentage(done, len(lessons)),
                lessons=[
                    LessonWithProgress(
                        id=lesson.id,
                        title=lesson.title,
                        order=lesson.order,
                        progress=(
                            LessonProgressOut.model_validate(progress[lesson.id])
                            if lesson.id in progress else None
                        ),
                    )
                    for lesson in lessons
                ],
            ))

        return CourseProgress(
            modules=module_views,
            progress=ProgressSummary(
                total=total,
                completed=completed,
                percentage=progress_percentage(completed, total),
            ),
        )

    def module_progress(self, student_id: str, module_id: str) -> int:
        """Completion percentage of the published lessons in one module."""
        lesson_ids = [
            lesson_id for (lesson_id,) in self.db.query(Lesson.id)
            .filter(Lesson.module_id == module_id, Lesson.is_published.is_(True))
            .all()
        ]
        progress = self._progress_by_lesson(student_id, lesson_ids)
        completed = sum(1 for row in progress.values() if row.is_completed)
        return progress_percentage(completed, len(lesson_ids))

    def set_lesson_progress(
        self,
        student_id: str,
        lesson_id: str,
        status: ProgressStatus,
        course_id: Optional[str] = None,
    ) -> LessonProgress:
        """Upsert the (lesson, student) progress row.

        ``completed_at`` is stamped when the status is completed and cleared
        for any other status, so moving back to in_progress drops the earlier
        completion time. With ``course_id`` the lesson must belong to that
        course, directly or through its module.
        """
        lesson = self.db.get(Lesson, lesson_id)
        if lesson is None:
            raise NotFoundError("Lesson not found")
        if course_id is not None:
            owner = lesson.module.course_id if lesson.module is not None else lesson.course_id
            if owner != course_id:
                raise NotFoundError("Lesson not found")

        record = (
            self.db.query(LessonProgress)
            .filter(LessonProgress.lesson_id == lesson_id, LessonProgress.student_id == student_id)
            .first()
        )
        if record is None:
            record = LessonProgress(lesson_id=lesson_id, student_id=student_id)
            self.db.add(record)

        record.status = status
        record.completed_at = utcnow() if status == ProgressStatus.completed else None

        self.db.commit()
        self.db.refresh(record)
        logger.info(f"Student {student_id} lesson {lesson_id} -> {status.value}")
        return record
