"""
Registration and login API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from quiz_api.api.deps import get_credential_service, get_token_service
from quiz_api.database import get_db
from quiz_api.schemas.auth import (
    LoginRequest, LoginResponse, RegisterRequest, RegisterResponse
)
from quiz_api.services.credential_service import CredentialService
from quiz_api.services.token_service import TokenService

router = APIRouter(tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(
    request: RegisterRequest,
    db: Session = Depends(get_db),
    credentials: CredentialService = Depends(get_credential_service)
):
    """
    Create a Teacher or Student account

    - 400 for missing fields or an unknown role
    - 409 when the username is taken
    """
    user_id = credentials.register(db, request.username, request.password, request.role)
    return RegisterResponse(id=user_id)


@router.post("/login", response_model=LoginResponse)
def login(
    request: LoginRequest,
    db: Session = Depends(get_db),
    credentials: CredentialService = Depends(get_credential_service),
    tokens: TokenService = Depends(get_token_service)
):
    """
    Exchange username and password for a token

    The token expires after JWT_EXPIRE_MINUTES and is sent back in the
    Authorization header, with or without a "Bearer " prefix.
    """
    user = credentials.authenticate(db, request.username, request.password)

    logger.info(f"User {user.id} logged in")

    return LoginResponse(token=tokens.issue(user), id=user.id, role=user.role)
