"""
User model - accounts for teachers and students
"""
import enum
from sqlalchemy import Column, Integer, String, Boolean, Enum, TIMESTAMP, false, func
from sqlalchemy.orm import relationship
from quiz_api.database import Base


class Role(str, enum.Enum):
    TEACHER = "Teacher"
    STUDENT = "Student"


class User(Base):
    """
    Users table - credentials are stored as bcrypt hashes only
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)  # bcrypt hash
    role = Column(
        Enum(Role, name="user_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False
    )
    quiz_completed = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(TIMESTAMP, server_default=func.now())

    questions = relationship("Question", back_populates="teacher")
    results = relationship("Result", back_populates="student")

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, role={self.role})>"
