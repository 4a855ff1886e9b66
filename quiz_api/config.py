"""
Configuration management using Pydantic Settings
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Database
    DATABASE_URL: Optional[str] = None  # Overrides the DB_* parts when set
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "quiz"
    DB_STATEMENT_TIMEOUT_MS: int = 10000

    # Tokens
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60

    # Password hashing
    BCRYPT_ROUNDS: int = 10

    # Application
    APP_NAME: str = "Quiz API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 5001
    ALLOWED_ORIGINS: List[str] = ["*"]
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 60
    RATE_LIMIT_PER_HOUR: int = 1000

    # Quiz Settings
    QUIZ_QUESTION_COUNT: int = 5
    MAX_QUIZ_QUESTIONS: int = 20

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @field_validator("JWT_SECRET")
    @classmethod
    def secret_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("JWT_SECRET must be set to a non-empty value")
        return value

    @field_validator("JWT_EXPIRE_MINUTES")
    @classmethod
    def expiry_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("JWT_EXPIRE_MINUTES must be positive")
        return value

    @property
    def database_url(self) -> str:
        """Full SQLAlchemy URL, built from the DB_* parts unless DATABASE_URL is set"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        return URL.create(
            "postgresql+psycopg2",
            username=self.DB_USER,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        ).render_as_string(hide_password=False)
