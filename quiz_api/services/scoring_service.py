"""
Quiz scoring service
Grades submitted answers against stored correct options and records them
"""
import logging
import uuid
from typing import Any, Dict, List
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from quiz_api.exceptions import ConflictError, InvalidQuestionReference, StoreError
from quiz_api.models import Question, Result
from quiz_api.schemas.quiz import SubmittedAnswer

logger = logging.getLogger(__name__)


class ScoringService:
    """
    Service for grading quiz submissions

    Policy:
    - The first answer to a question in a submission is graded, repeats are ignored
    - An unknown question id rejects the whole submission
    - Questions the student answered in an earlier submission are skipped
    - All rows of a submission are written in one transaction

    The returned score always equals the number of correct rows persisted.
    """

    def score_submission(
        self,
        db: Session,
        student_id: int,
        answers: List[SubmittedAnswer]
    ) -> Dict[str, Any]:
        """
        Grade and record a submission

        Args:
            db: Database session
            student_id: Id of the submitting student
            answers: Submitted answers, in submission order

        Returns:
            Dictionary with score, total, quiz_id, skipped and breakdown
        """
        # First answer per question wins
        selections: Dict[int, str] = {}
        for answer in answers:
            selections.setdefault(answer.question_id, answer.selected_option)

        if not selections:
            logger.info(f"Empty submission from student {student_id}")
            return {"score": 0, "total": 0, "quiz_id": None, "skipped": [], "breakdown": []}

        question_ids = list(selections)
        quiz_id = uuid.uuid4().hex
        score = 0
        skipped = []
        breakdown = []

        try:
            questions = db.query(Question).filter(Question.id.in_(question_ids)).all()
            by_id = {q.id: q for q in questions}

            missing = [q_id for q_id in question_ids if q_id not in by_id]
            if missing:
                raise InvalidQuestionReference(missing)

            already_answered = {
                row.question_id for row in db.query(Result.question_id).filter(
                    Result.student_id == student_id,
                    Result.question_id.in_(question_ids)
                )
            }

            for q_id, selected in selections.items():
                if q_id in already_answered:
                    skipped.append(q_id)
                    continue

                correct_option = by_id[q_id].correct_option
                is_correct = selected == correct_option
                if is_correct:
                    score += 1

                db.add(Result(
                    student_id=student_id,
                    question_id=q_id,
                    selected_option=selected,
                    is_correct=is_correct,
                    score=score,
                    quiz_id=quiz_id
                ))

                breakdown.append({
                    "question_id": q_id,
                    "selected_option": selected,
                    "correct_option": correct_option,
                    "is_correct": is_correct
                })

            db.commit()

        except IntegrityError:
            # A concurrent submission recorded one of these questions first
            db.rollback()
            logger.warning(f"Concurrent submission conflict for student {student_id}")
            raise ConflictError("Some answers were already recorded; submission discarded")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to record submission for student {student_id}: {str(e)}")
            raise StoreError("Failed to record quiz results") from e

        logger.info(
            f"Submission graded: student={student_id}, quiz={quiz_id}, "
            f"score={score}/{len(breakdown)}, skipped={skipped}"
        )

        return {
            "score": score,
            "total": len(breakdown),
            "quiz_id": quiz_id if breakdown else None,
            "skipped": skipped,
            "breakdown": breakdown
        }


# Global instance
scoring_service = ScoringService()
