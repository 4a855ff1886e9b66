"""
Database models package
"""
from quiz_api.models.user import User, Role
from quiz_api.models.question import Question, OPTION_LABELS
from quiz_api.models.result import Result

__all__ = ["User", "Role", "Question", "OPTION_LABELS", "Result"]
