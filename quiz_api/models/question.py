"""
Question model - teacher-authored multiple-choice questions
"""
from sqlalchemy import Column, Integer, String, Text, TIMESTAMP, ForeignKey, func
from sqlalchemy.orm import relationship
from quiz_api.database import Base


OPTION_LABELS = ("a", "b", "c", "d")


class Question(Base):
    """
    Questions table - four options and the label of the correct one
    """
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    question = Column(Text, nullable=False)
    option_a = Column(Text, nullable=False)
    option_b = Column(Text, nullable=False)
    option_c = Column(Text, nullable=False)
    option_d = Column(Text, nullable=False)
    correct_option = Column(String(1), nullable=False)  # a, b, c or d
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(TIMESTAMP, server_default=func.now())

    teacher = relationship("User", back_populates="questions")
    results = relationship("Result", back_populates="question", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Question(id={self.id}, teacher_id={self.teacher_id})>"
