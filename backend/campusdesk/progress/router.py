"""Student course progress endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from campusdesk.auth import Action, Resource, StudentProfile, User, get_current_student, require
from campusdesk.database import get_db
from .schemas import CourseProgress, LessonProgressResponse, LessonProgressUpdate
from .service import ProgressService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/student/courses", tags=["Progress"])


def get_progress_service(db: Session = Depends(get_db)) -> ProgressService:
    return ProgressService(db)


@router.get("/{course_id}/progress", response_model=CourseProgress)
def get_course_progress(
    course_id: str,
    current_user: User = Depends(require(Resource.progress, Action.read)),
    student: StudentProfile = Depends(get_current_student),
    service: ProgressService = Depends(get_progress_service),
):
    """Get the calling student's progress for a course."""
    try:
        return service.course_progress(student.id, course_id)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Failed to fetch course progress")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch progress"
        )


@router.post("/{course_id}/progress", response_model=LessonProgressResponse)
def update_lesson_progress(
    course_id: str,
    body: LessonProgressUpdate,
    current_user: User = Depends(require(Resource.progress, Action.update)),
    student: StudentProfile = Depends(get_current_student),
    service: ProgressService = Depends(get_progress_service),
):
    """Mark a lesson as started or complete."""
    try:
        record = service.set_lesson_progress(student.id, body.lesson_id, body.status, course_id=course_id)
        return {"progress": record}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Failed to update progress")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update progress"
        )
