"""Student quiz endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from campusdesk.auth import Action, Resource, StudentProfile, User, get_current_student, require
from campusdesk.database import get_db
from .schemas import StartAttemptResponse, SubmitAttemptRequest, SubmitAttemptResponse
from .service import QuizService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/student/quizzes", tags=["Quizzes"])

take_quizzes = require(Resource.quizzes, Action.take)


def get_quiz_service(db: Session = Depends(get_db)) -> QuizService:
    return QuizService(db)


@router.post("/{quiz_id}/start", response_model=StartAttemptResponse)
def start_quiz(
    quiz_id: str,
    current_user: User = Depends(take_quizzes),
    student: StudentProfile = Depends(get_current_student),
    service: QuizService = Depends(get_quiz_service),
):
    try:
        attempt, resumed = service.start_attempt(quiz_id, student.id)
        return {"attempt": attempt, "resumed": resumed}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Failed to start quiz")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to start quiz"
        )


@router.post("/{quiz_id}/submit", response_model=SubmitAttemptResponse)
def submit_quiz(
    quiz_id: str,
    body: SubmitAttemptRequest,
    current_user: User = Depends(take_quizzes),
    student: StudentProfile = Depends(get_current_student),
    service: QuizService = Depends(get_quiz_service),
):
    try:
        attempt, results = service.submit_attempt(quiz_id, body.attempt_id, student.id, body.answers)
        return {"attempt": attempt, "results": results}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Failed to submit quiz")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to submit quiz"
        )
