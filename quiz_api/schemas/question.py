"""
Pydantic schemas for question-related requests and responses
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional

from quiz_api.models import OPTION_LABELS

# Largest value an INTEGER primary key can hold
MAX_ID = 2**31 - 1


def normalize_label(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    label = value.strip().lower()
    if label not in OPTION_LABELS:
        raise ValueError("option must be one of a, b, c, d")
    return label


class QuestionCreate(BaseModel):
    """Schema for authoring a question"""
    question: str = Field(..., min_length=1, description="Question text")
    option_a: str = Field(..., min_length=1)
    option_b: str = Field(..., min_length=1)
    option_c: str = Field(..., min_length=1)
    option_d: str = Field(..., min_length=1)
    correct_option: str = Field(..., description="Label of the correct option (a-d)")

    @field_validator("correct_option")
    @classmethod
    def check_correct_option(cls, value: str) -> str:
        return normalize_label(value)


class LegacyQuestionCreate(QuestionCreate):
    """Question payload that names its teacher explicitly"""
    teacher_id: int = Field(..., ge=1, le=MAX_ID, description="Id of the owning teacher")


class QuestionUpdate(BaseModel):
    """Partial update, only provided fields are changed"""
    question: Optional[str] = Field(None, min_length=1)
    option_a: Optional[str] = Field(None, min_length=1)
    option_b: Optional[str] = Field(None, min_length=1)
    option_c: Optional[str] = Field(None, min_length=1)
    option_d: Optional[str] = Field(None, min_length=1)
    correct_option: Optional[str] = None

    @field_validator("correct_option")
    @classmethod
    def check_correct_option(cls, value: Optional[str]) -> Optional[str]:
        return normalize_label(value)


class QuestionCreated(BaseModel):
    id: int


class QuestionPublic(BaseModel):
    """Question as shown to students, without the answer"""
    id: int
    question: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str

    class Config:
        from_attributes = True


class QuestionResponse(QuestionPublic):
    """Question as seen by its owner"""
    correct_option: str
    teacher_id: int

    class Config:
        from_attributes = True


class AddQuestionResponse(BaseModel):
    question: QuestionResponse
