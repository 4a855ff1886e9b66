"""
Quiz taking, submission and completion API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from quiz_api.api.deps import (
    get_credential_service, get_current_user, require_student
)
from quiz_api.api.questions import question_limit
from quiz_api.database import get_db
from quiz_api.exceptions import AuthorizationError, NotFoundError
from quiz_api.models import Role
from quiz_api.schemas.auth import Identity
from quiz_api.schemas.question import QuestionPublic
from quiz_api.schemas.quiz import (
    MessageResponse, QuizCompleteRequest, QuizGradingResponse, QuizStatus, QuizSubmission
)
from quiz_api.services.credential_service import CredentialService
from quiz_api.services.question_service import question_service
from quiz_api.services.scoring_service import scoring_service

router = APIRouter(tags=["quiz"])
logger = logging.getLogger(__name__)


@router.get("/quiz/questions", response_model=List[QuestionPublic])
def get_quiz_questions(
    user: Identity = Depends(require_student),
    limit: int = Depends(question_limit),
    db: Session = Depends(get_db)
):
    """Random set of questions for a student to answer, answers hidden"""
    return question_service.list_random(db, limit)


@router.post("/submit", response_model=QuizGradingResponse)
@router.post("/quiz/submit", response_model=QuizGradingResponse, include_in_schema=False)
def submit_quiz(
    submission: QuizSubmission,
    user: Identity = Depends(require_student),
    db: Session = Depends(get_db)
):
    """
    Submit and grade answers

    - Each answer names its question as `id` or `questionId`
    - Repeated questions in one submission count once
    - Unknown question ids reject the whole submission (404)
    - Questions already answered in a previous submission are skipped

    Returns the score of the answers recorded by this submission.
    """
    logger.info(f"Grading {len(submission.answers)} answers for student {user.id}")

    result = scoring_service.score_submission(db, user.id, submission.answers)
    return QuizGradingResponse(**result)


@router.get("/quiz/status", response_model=QuizStatus)
def get_quiz_status(
    user: Identity = Depends(get_current_user),
    db: Session = Depends(get_db),
    credentials: CredentialService = Depends(get_credential_service)
):
    """Whether the caller has completed the quiz"""
    account = credentials.get_by_id(db, user.id)
    if not account:
        raise NotFoundError("User not found")

    return {"quiz_completed": account.quiz_completed}


@router.post("/quiz/complete", response_model=MessageResponse)
def complete_quiz(
    payload: Optional[QuizCompleteRequest] = None,
    user: Identity = Depends(get_current_user),
    db: Session = Depends(get_db),
    credentials: CredentialService = Depends(get_credential_service)
):
    """
    Mark a quiz as completed

    userId defaults to the caller; only teachers may mark other users.
    """
    target_id = payload.user_id if payload and payload.user_id is not None else user.id

    if target_id != user.id and user.role != Role.TEACHER:
        raise AuthorizationError()

    credentials.mark_quiz_completed(db, target_id)
    return MessageResponse(message="Quiz marked as completed")
