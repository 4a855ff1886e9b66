"""
Question authoring and listing API endpoints
"""
from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from quiz_api.api.deps import get_optional_user, require_teacher
from quiz_api.database import get_db
from quiz_api.exceptions import AuthorizationError
from quiz_api.models import Role
from quiz_api.schemas.auth import Identity
from quiz_api.schemas.question import (
    MAX_ID, AddQuestionResponse, LegacyQuestionCreate, QuestionCreate, QuestionCreated,
    QuestionPublic, QuestionResponse, QuestionUpdate
)
from quiz_api.services.question_service import question_service

router = APIRouter(tags=["questions"])
logger = logging.getLogger(__name__)


def question_limit(
    request: Request,
    limit: Optional[int] = Query(None, ge=1, description="Number of random questions")
) -> int:
    """Requested sample size, defaulting to and capped by the settings"""
    settings = request.app.state.settings
    if limit is None:
        return settings.QUIZ_QUESTION_COUNT
    return min(limit, settings.MAX_QUIZ_QUESTIONS)


@router.post("/questions", response_model=QuestionCreated, status_code=201)
@router.post("/quiz", response_model=QuestionCreated, status_code=201, include_in_schema=False)
def create_question(
    payload: QuestionCreate,
    user: Identity = Depends(require_teacher),
    db: Session = Depends(get_db)
):
    """Create a question owned by the calling teacher"""
    question = question_service.create(db, payload.model_dump(), teacher_id=user.id)
    return QuestionCreated(id=question.id)


@router.get("/questions", response_model=None)
def list_questions(
    user: Optional[Identity] = Depends(get_optional_user),
    limit: int = Depends(question_limit),
    db: Session = Depends(get_db)
):
    """
    List questions

    - Teacher token: the teacher's own questions, answers included
    - No token: a random sample without answers
    - Any other role: 403
    """
    if user is None:
        questions = question_service.list_random(db, limit)
        return [QuestionPublic.model_validate(q) for q in questions]

    if user.role != Role.TEACHER:
        raise AuthorizationError()

    questions = question_service.list_by_teacher(db, user.id)
    return [QuestionResponse.model_validate(q) for q in questions]


@router.get("/quiz", response_model=List[QuestionPublic])
def sample_questions(
    limit: int = Depends(question_limit),
    db: Session = Depends(get_db)
):
    """Random sample of questions without answers"""
    return question_service.list_random(db, limit)


@router.put("/update-question/{question_id}", response_model=QuestionResponse)
def update_question(
    payload: QuestionUpdate,
    question_id: int = Path(..., ge=1, le=MAX_ID),
    user: Identity = Depends(require_teacher),
    db: Session = Depends(get_db)
):
    """Update fields of a question the caller owns"""
    return question_service.update(
        db, question_id, payload.model_dump(exclude_unset=True), teacher_id=user.id
    )


@router.delete("/delete-question/{question_id}", response_model=QuestionResponse)
def delete_question(
    question_id: int = Path(..., ge=1, le=MAX_ID),
    user: Identity = Depends(require_teacher),
    db: Session = Depends(get_db)
):
    """Delete a question the caller owns, returning the deleted row"""
    return question_service.delete(db, question_id, teacher_id=user.id)


@router.post("/add-question", response_model=AddQuestionResponse)
def add_question(
    payload: LegacyQuestionCreate,
    db: Session = Depends(get_db)
):
    """
    Create a question for the teacher named by teacher_id

    Unauthenticated; teacher_id must reference an existing Teacher.
    """
    fields = payload.model_dump(exclude={"teacher_id"})
    question = question_service.create_for_teacher_id(db, fields, payload.teacher_id)
    return AddQuestionResponse(question=QuestionResponse.model_validate(question))
