"""
Application error taxonomy

Each error carries the HTTP status it is rendered with by the handlers in main.py.
"""
from typing import Iterable


class QuizAPIError(Exception):
    """Base class for errors that map to an HTTP response"""

    status_code = 500
    error = "internal_error"

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message)
        self.message = message


class ValidationError(QuizAPIError):
    status_code = 400
    error = "validation_error"


class InvalidCredentialsError(QuizAPIError):
    status_code = 401
    error = "invalid_credentials"

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class AuthenticationError(QuizAPIError):
    """Missing, malformed, forged or expired token"""

    status_code = 403
    error = "authentication_error"

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class AuthorizationError(QuizAPIError):
    """Valid identity without the required role or ownership"""

    status_code = 403
    error = "authorization_error"

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class NotFoundError(QuizAPIError):
    status_code = 404
    error = "not_found"


class InvalidQuestionReference(NotFoundError):
    """A submitted answer points at a question that does not exist"""

    error = "invalid_question_reference"

    def __init__(self, question_ids: Iterable[int]):
        self.question_ids = sorted(question_ids)
        ids = ", ".join(str(q_id) for q_id in self.question_ids)
        super().__init__(f"Unknown question id(s): {ids}")


class ConflictError(QuizAPIError):
    status_code = 409
    error = "conflict"


class StoreError(QuizAPIError):
    """Underlying database failure"""

    status_code = 500
    error = "store_error"
