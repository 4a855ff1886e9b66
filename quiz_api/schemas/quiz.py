"""
Pydantic schemas for quiz submission, grading and completion status
"""
from pydantic import AliasChoices, BaseModel, Field, field_validator
from typing import List, Optional

from quiz_api.schemas.question import MAX_ID, normalize_label


class SubmittedAnswer(BaseModel):
    """One answer; the question may be referenced as id or questionId"""
    question_id: int = Field(
        ..., ge=1, le=MAX_ID, validation_alias=AliasChoices("questionId", "id", "question_id")
    )
    selected_option: str = Field(
        ..., validation_alias=AliasChoices("selectedOption", "selected_option")
    )

    @field_validator("selected_option")
    @classmethod
    def check_selected_option(cls, value: str) -> str:
        return normalize_label(value)


class QuizSubmission(BaseModel):
    """Schema for quiz submission"""
    answers: List[SubmittedAnswer]


class AnswerGrading(BaseModel):
    """Grading details for a single recorded answer"""
    question_id: int
    selected_option: str
    correct_option: str
    is_correct: bool


class QuizGradingResponse(BaseModel):
    """Response after quiz grading"""
    score: int
    total: int
    quiz_id: Optional[str] = None
    skipped: List[int] = []
    breakdown: List[AnswerGrading] = []


class QuizStatus(BaseModel):
    quiz_completed: bool = Field(..., serialization_alias="quizCompleted")


class QuizCompleteRequest(BaseModel):
    user_id: Optional[int] = Field(
        None, ge=1, le=MAX_ID, validation_alias=AliasChoices("userId", "user_id")
    )


class MessageResponse(BaseModel):
    message: str
