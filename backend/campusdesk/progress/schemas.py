"""Bodies for course progress endpoints."""
from datetime import datetime
from typing import Optional

from campusdesk.models import ProgressStatus
from campusdesk.schemas import CamelModel


class LessonProgressOut(CamelModel):
    id: str
    lesson_id: str
    student_id: str
    status: ProgressStatus
    completed_at: Optional[datetime] = None


class LessonWithProgress(CamelModel):
    id: str
    title: str
    order: int
    progress: Optional[LessonProgressOut] = None


class ModuleWithProgress(CamelModel):
    id: str
    title: str
    order: int
    lessons: list[LessonWithProgress]
    percentage: int


class ProgressSummary(CamelModel):
    total: int
    completed: int
    percentage: int


class CourseProgress(CamelModel):
    modules: list[ModuleWithProgress]
    progress: ProgressSummary


class LessonProgressUpdate(CamelModel):
    lesson_id: str
    status: ProgressStatus


class LessonProgressResponse(CamelModel):
    progress: LessonProgressOut
