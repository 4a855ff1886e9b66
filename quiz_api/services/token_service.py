"""
Signed, time-bounded identity tokens (JWT, HS256)
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
import jwt

from quiz_api.exceptions import AuthenticationError
from quiz_api.models import Role, User
from quiz_api.schemas.auth import Identity

logger = logging.getLogger(__name__)


class TokenService:
    """
    Issues and verifies tokens carrying a user's id and role

    Verification fails closed: every failure raises the same AuthenticationError.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 60):
        if not secret:
            raise ValueError("Token signing secret is required")
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, user: User, expires_delta: Optional[timedelta] = None) -> str:
        now = datetime.now(timezone.utc)
        expires_at = now + (expires_delta or timedelta(minutes=self.expire_minutes))

        payload = {
            "id": user.id,
            "role": Role(user.role).value,
            "iat": now,
            "exp": expires_at,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> Identity:
        if not token:
            raise AuthenticationError()

        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]}
            )
            return Identity(id=claims["id"], role=claims["role"])
        except (jwt.PyJWTError, KeyError, ValueError) as e:
            logger.debug(f"Token rejected: {type(e).__name__}")
            raise AuthenticationError() from None
