"""
Pydantic schemas for registration, login and token identity
"""
from pydantic import BaseModel, Field, field_validator

from quiz_api.models import Role


def _strip_username(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("username must not be blank")
    return value


class RegisterRequest(BaseModel):
    """Schema for creating an account"""
    username: str = Field(..., min_length=1, max_length=50, description="Unique username")
    password: str = Field(..., min_length=1, description="Raw password, hashed before storage")
    role: Role = Field(..., description="Teacher or Student")

    @field_validator("username")
    @classmethod
    def strip_username(cls, value: str) -> str:
        return _strip_username(value)

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value):
        # Accept "teacher" / "STUDENT" as well as the canonical spelling
        if isinstance(value, str):
            return value.strip().capitalize()
        return value


class RegisterResponse(BaseModel):
    id: int


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def strip_username(cls, value: str) -> str:
        return _strip_username(value)


class LoginResponse(BaseModel):
    token: str
    id: int
    role: Role


class Identity(BaseModel):
    """Verified identity carried by a token"""
    id: int
    role: Role
