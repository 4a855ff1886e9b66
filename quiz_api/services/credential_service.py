"""
Credential store: account registration, lookup and password checks
"""
import logging
from typing import Optional
import bcrypt
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from quiz_api.exceptions import (
    ConflictError, InvalidCredentialsError, NotFoundError, StoreError, ValidationError
)
from quiz_api.models import Role, User

logger = logging.getLogger(__name__)


class CredentialService:
    """
    Service for user accounts

    Passwords are hashed with bcrypt (salted, one-way); raw values are never stored.
    """

    # bcrypt only considers the first 72 bytes of a password
    MAX_PASSWORD_BYTES = 72

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash_password(self, password: str) -> str:
        encoded = password.encode("utf-8")
        if len(encoded) > self.MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {self.MAX_PASSWORD_BYTES} bytes")
        return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        encoded = password.encode("utf-8")
        if len(encoded) > self.MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(encoded, hashed.encode("utf-8"))

    def find_by_username(self, db: Session, username: str) -> Optional[User]:
        return db.query(User).filter(User.username == username).first()

    def get_by_id(self, db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    def register(self, db: Session, username: str, password: str, role: Role) -> int:
        """
        Create an account

        Returns:
            Id of the new user

        Raises:
            ValidationError: missing field or unusable password
            ConflictError: username already taken
        """
        if not username or not password or role is None:
            raise ValidationError("username, password and role are required")

        if self.find_by_username(db, username):
            raise ConflictError(f"Username '{username}' is already taken")

        user = User(username=username, password=self.hash_password(password), role=role)

        try:
            db.add(user)
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration
            db.rollback()
            raise ConflictError(f"Username '{username}' is already taken")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to register user {username}: {str(e)}")
            raise StoreError("Failed to register user") from e

        logger.info(f"User registered: id={user.id}, role={role.value}")
        return user.id

    def authenticate(self, db: Session, username: str, password: str) -> User:
        """Return the user whose credentials match, or raise"""
        user = self.find_by_username(db, username)
        if not user:
            raise NotFoundError("User not found")

        if not self.verify_password(password, user.password):
            logger.info(f"Failed login for user id={user.id}")
            raise InvalidCredentialsError()

        return user

    def mark_quiz_completed(self, db: Session, user_id: int) -> User:
        user = self.get_by_id(db, user_id)
        if not user:
            raise NotFoundError("User not found")

        try:
            user.quiz_completed = True
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to mark quiz completed for user {user_id}: {str(e)}")
            raise StoreError("Failed to update quiz status") from e

        logger.info(f"Quiz marked completed for user {user_id}")
        return user
