"""
Request dependencies: service handles and the authentication gate
"""
from typing import Callable, Optional
from fastapi import Depends, Header, Request
import logging

from quiz_api.exceptions import AuthenticationError, AuthorizationError
from quiz_api.models import Role
from quiz_api.schemas.auth import Identity
from quiz_api.services.credential_service import CredentialService
from quiz_api.services.token_service import TokenService

logger = logging.getLogger(__name__)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_credential_service(request: Request) -> CredentialService:
    return request.app.state.credential_service


def extract_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an Authorization header value

    Accepts both "<token>" and "Bearer <token>".
    """
    if authorization is None:
        raise AuthenticationError()

    parts = authorization.strip().split()
    if len(parts) == 1:
        return parts[0]
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]

    raise AuthenticationError()


def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service)
) -> Identity:
    """Reject the request unless it carries a valid token"""
    identity = tokens.verify(extract_token(authorization))
    request.state.user = identity
    return identity


def get_optional_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service)
) -> Optional[Identity]:
    """Anonymous when no header is sent; a header that is sent must be valid"""
    if authorization is None:
        return None
    return get_current_user(request, authorization, tokens)


def require_role(role: Role) -> Callable[..., Identity]:
    """Build a dependency admitting only authenticated users with `role`"""

    def dependency(user: Identity = Depends(get_current_user)) -> Identity:
        if user.role != role:
            logger.info(f"User {user.id} ({user.role.value}) denied {role.value}-only route")
            raise AuthorizationError()
        return user

    return dependency


require_teacher = require_role(Role.TEACHER)
require_student = require_role(Role.STUDENT)
