"""Request and response bodies for grading and rubric endpoints."""
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from campusdesk.models import MAX_CRITERION_POINTS, SubmissionStatus
from campusdesk.schemas import CamelModel, PatchModel


class CriterionScoreIn(CamelModel):
    criterion_id: str
    score: float
    comment: Optional[str] = None


class RubricGradeRequest(CamelModel):
    # Both checked by the service so the caller gets a readable 400
    submission_id: Optional[str] = None
    scores: Optional[list[CriterionScoreIn]] = None
    feedback: Optional[str] = None


class RubricGradeResponse(CamelModel):
    success: bool = True
    total_score: float


class DirectGradeRequest(CamelModel):
    grade: Optional[float] = None
    feedback: Optional[str] = None


class SubmissionOut(CamelModel):
    id: str
    assignment_id: str
    student_id: str
    status: SubmissionStatus
    grade: Optional[float] = None
    feedback: Optional[str] = None
    graded_by: Optional[int] = None
    graded_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None


class SubmissionResponse(CamelModel):
    submission: SubmissionOut


class CriterionIn(CamelModel):
    title: str
    description: Optional[str] = None
    max_points: float

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Each criterion must have a title")
        return v.strip()

    @field_validator("max_points")
    @classmethod
    def points_in_range(cls, v: float) -> float:
        if v <= 0 or v > MAX_CRITERION_POINTS:
            raise ValueError(f"maxPoints must be between 1 and {MAX_CRITERION_POINTS} (got {v})")
        return v


class RubricCreate(CamelModel):
    title: str
    description: Optional[str] = None
    criteria: list[CriterionIn] = Field(..., min_length=1)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        return v.strip()


class RubricUpdate(PatchModel):
    title: Optional[str] = None
    description: Optional[str] = None
    criteria: Optional[list[CriterionIn]] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Title is required")
        return v.strip() if v is not None else v


class CriterionOut(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    max_points: float
    order: int


class RubricOut(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    created_by: Optional[int] = None
    total_points: float
    criteria: list[CriterionOut]


class RubricResponse(CamelModel):
    rubric: RubricOut


class RubricListResponse(CamelModel):
    rubrics: list[RubricOut]


class CourseGradeResponse(CamelModel):
    percentage: float
    letter_grade: str
    is_weighted: bool
