"""
Result model - one row per answered question
"""
from sqlalchemy import (
    Column, Integer, String, Boolean, TIMESTAMP, ForeignKey, UniqueConstraint, func
)
from sqlalchemy.orm import relationship
from quiz_api.database import Base


class Result(Base):
    """
    Results table - a student's answer to a question within one submission

    At most one row per (student, question).
    """
    __tablename__ = "results"
    __table_args__ = (
        UniqueConstraint("student_id", "question_id", name="uq_results_student_question"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    question_id = Column(
        Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False
    )
    selected_option = Column(String(1), nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)
    score = Column(Integer, nullable=False, default=0)  # Running score within the submission
    quiz_id = Column(String(32), nullable=False, index=True)  # Groups rows of one submission
    created_at = Column(TIMESTAMP, server_default=func.now())

    student = relationship("User", back_populates="results")
    question = relationship("Question", back_populates="results")

    def __repr__(self):
        return f"<Result(student_id={self.student_id}, question_id={self.question_id}, score={self.score})>"
