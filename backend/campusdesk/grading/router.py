"""Grading, rubric and course grade endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from campusdesk.auth import Action, Resource, StudentProfile, User, get_current_student, require
from campusdesk.database import get_db
from .schemas import (
    CourseGradeResponse, DirectGradeRequest, RubricCreate, RubricGradeRequest,
    RubricGradeResponse, RubricListResponse, RubricResponse, RubricUpdate, SubmissionResponse,
)
from .service import GradingService, RubricService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Grading"])


def get_grading_service(db: Session = Depends(get_db)) -> GradingService:
    return GradingService(db)


def get_rubric_service(db: Session = Depends(get_db)) -> RubricService:
    return RubricService(db)


def _internal_error(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


@router.post("/admin/assignments/{assignment_id}/rubric-grade", response_model=RubricGradeResponse)
def submit_rubric_grades(
    assignment_id: str,
    body: RubricGradeRequest,
    current_user: User = Depends(require(Resource.submissions, Action.grade)),
    service: GradingService = Depends(get_grading_service),
):
    """Submit rubric scores for a submission."""
    try:
        total = service.submit_rubric_grades(
            assignment_id,
            body.submission_id,
            body.scores,
            feedback=body.feedback,
            grader_id=current_user.id,
        )
        return RubricGradeResponse(total_score=total)
    except HTTPException:
        raise
    except Exception:
        logger.exception("[RUBRIC_GRADE] failed")
        raise _internal_error("Failed to submit rubric grades")


@router.put(
    "/admin/assignments/{assignment_id}/submissions/{submission_id}",
    response_model=SubmissionResponse,
)
def grade_submission(
    assignment_id: str,
    submission_id: str,
    body: DirectGradeRequest,
    current_user: User = Depends(require(Resource.submissions, Action.grade)),
    service: GradingService = Depends(get_grading_service),
):
    """Grade a submission directly."""
    try:
        submission = service.grade_submission(
            submission_id,
            current_user.id,
            grade=body.grade,
            feedback=body.feedback,
            assignment_id=assignment_id,
        )
        return {"submission": submission}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Failed to grade submission")
        raise _internal_error("Failed to grade submission")


@router.get("/admin/rubrics", response_model=RubricListResponse)
def list_rubrics(
    current_user: User = Depends(require(Resource.rubrics, Action.read)),
    service: RubricService = Depends(get_rubric_service),
):
    return {"rubrics": service.list_rubrics()}


@router.post("/admin/rubrics", response_model=RubricResponse, status_code=status.HTTP_201_CREATED)
def create_rubric(
    body: RubricCreate,
    current_user: User = Depends(require(Resource.rubrics, Action.manage)),
    service: RubricService = Depends(get_rubric_service),
):
    try:
        return {"rubric": service.create_rubric(body, created_by=current_user.id)}
    except HTTPException:
        raise
    except Exception:
        logger.exception("[RUBRICS_POST] failed")
        raise _internal_error("Failed to create rubric")


@router.get("/admin/rubrics/{rubric_id}", response_model=RubricResponse)
def get_rubric(
    rubric_id: str,
    current_user: User = Depends(require(Resource.rubrics, Action.read)),
    service: RubricService = Depends(get_rubric_service),
):
    return {"rubric": service.get_rubric(rubric_id)}


@router.put("/admin/rubrics/{rubric_id}", response_model=RubricResponse)
def update_rubric(
    rubric_id: str,
    body: RubricUpdate,
    current_user: User = Depends(require(Resource.rubrics, Action.manage)),
    service: RubricService = Depends(get_rubric_service),
):
    try:
        return {"rubric": service.update_rubric(rubric_id, body)}
    except HTTPException:
        raise
    except Exception:
        logger.exception("[RUBRIC_PUT] failed")
        raise _internal_error("Failed to update rubric")


@router.delete("/admin/rubrics/{rubric_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_rubric(
    rubric_id: str,
    current_user: User = Depends(require(Resource.rubrics, Action.manage)),
    service: RubricService = Depends(get_rubric_service),
):
    try:
        service.delete_rubric(rubric_id)
    except HTTPException:
        raise
    except Exception:
        logger.exception("[RUBRIC_DELETE] failed")
        raise _internal_error("Failed to delete rubric")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/student/courses/{course_id}/grade", response_model=CourseGradeResponse)
def get_course_grade(
    course_id: str,
    current_user: User = Depends(require(Resource.grades, Action.read)),
    student: StudentProfile = Depends(get_current_student),
    service: GradingService = Depends(get_grading_service),
):
    """Current grade of the calling student in a course."""
    return service.course_grade(student.id, course_id)
