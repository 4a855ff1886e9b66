"""
Question catalog: authoring, listing and random selection
"""
import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quiz_api.exceptions import AuthorizationError, NotFoundError, StoreError, ValidationError
from quiz_api.models import Question, Role, User

logger = logging.getLogger(__name__)


class QuestionService:
    """Service for the question catalog"""

    EDITABLE_FIELDS = (
        "question", "option_a", "option_b", "option_c", "option_d", "correct_option"
    )

    def create(self, db: Session, fields: Dict[str, Any], teacher_id: int) -> Question:
        """
        Store a new question owned by teacher_id

        The caller is responsible for checking the teacher's role.
        """
        question = Question(
            **{name: fields[name] for name in self.EDITABLE_FIELDS},
            teacher_id=teacher_id
        )

        try:
            db.add(question)
            db.commit()
            db.refresh(question)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to create question: {str(e)}")
            raise StoreError("Failed to create question") from e

        logger.info(f"Question created: id={question.id}, teacher={teacher_id}")
        return question

    def create_for_teacher_id(self, db: Session, fields: Dict[str, Any], teacher_id: int) -> Question:
        """Create a question for a teacher named in the payload rather than the token"""
        teacher = db.query(User).filter(User.id == teacher_id).first()
        if not teacher or teacher.role != Role.TEACHER:
            raise ValidationError("teacher_id must reference an existing Teacher")

        return self.create(db, fields, teacher_id)

    def get(self, db: Session, question_id: int) -> Optional[Question]:
        return db.query(Question).filter(Question.id == question_id).first()

    def list_random(self, db: Session, limit: int) -> List[Question]:
        """
        Pick up to `limit` distinct questions uniformly at random

        Returns fewer when the catalog holds fewer questions.
        """
        if limit < 1:
            raise ValidationError("limit must be at least 1")

        return db.query(Question).order_by(func.random()).limit(limit).all()

    def list_by_teacher(self, db: Session, teacher_id: int) -> List[Question]:
        return (
            db.query(Question)
            .filter(Question.teacher_id == teacher_id)
            .order_by(Question.id)
            .all()
        )

    def _get_owned(self, db: Session, question_id: int, teacher_id: int) -> Question:
        question = self.get(db, question_id)
        if not question:
            raise NotFoundError("Question not found")
        if question.teacher_id != teacher_id:
            raise AuthorizationError("Question belongs to another teacher")
        return question

    def update(
        self,
        db: Session,
        question_id: int,
        fields: Dict[str, Any],
        teacher_id: int
    ) -> Question:
        """Apply a partial update; only non-null editable fields are written"""
        question = self._get_owned(db, question_id, teacher_id)

        changes = {
            name: value for name, value in fields.items()
            if name in self.EDITABLE_FIELDS and value is not None
        }
        for name, value in changes.items():
            setattr(question, name, value)

        try:
            db.commit()
            db.refresh(question)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to update question {question_id}: {str(e)}")
            raise StoreError("Failed to update question") from e

        logger.info(f"Question updated: id={question_id}, fields={sorted(changes)}")
        return question

    def delete(self, db: Session, question_id: int, teacher_id: int) -> Question:
        """Delete a question and its recorded results; returns the deleted row"""
        question = self._get_owned(db, question_id, teacher_id)

        try:
            db.delete(question)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to delete question {question_id}: {str(e)}")
            raise StoreError("Failed to delete question") from e

        logger.info(f"Question deleted: id={question_id}")
        return question


# Global instance
question_service = QuestionService()
