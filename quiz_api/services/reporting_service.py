"""
Reporting service for teacher dashboards and student performance
"""
import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import case, func
from sqlalchemy.orm import Session

from quiz_api.models import Result, Role, User

logger = logging.getLogger(__name__)


class ReportingService:
    """Read-only aggregate queries over users and results"""

    def list_students(self, db: Session) -> List[Dict[str, Any]]:
        students = (
            db.query(User.id, User.username)
            .filter(User.role == Role.STUDENT)
            .order_by(User.id)
            .all()
        )
        return [{"id": s.id, "username": s.username} for s in students]

    def top_student(self, db: Session) -> Optional[Dict[str, Any]]:
        """
        Student owning the single highest-scoring result row

        Ties go to the earliest result (created_at, then id).
        """
        row = (
            db.query(User.id, User.username, Result.score)
            .join(Result, Result.student_id == User.id)
            .order_by(Result.score.desc(), Result.created_at.asc(), Result.id.asc())
            .first()
        )

        if row is None:
            return None

        return {"id": row.id, "username": row.username, "score": row.score}

    def student_performance(self, db: Session) -> List[Dict[str, Any]]:
        """
        Correct-answer totals and last attempt per student

        Ordered by total score, then most recent attempt, both descending.
        """
        total_score = func.sum(case((Result.is_correct, 1), else_=0)).label("total_score")
        last_attempt = func.max(Result.created_at).label("last_attempt")

        rows = (
            db.query(User.username.label("student_name"), total_score, last_attempt)
            .join(Result, Result.student_id == User.id)
            .filter(User.role == Role.STUDENT)
            .group_by(User.id, User.username)
            .order_by(total_score.desc(), last_attempt.desc(), User.id.asc())
            .all()
        )

        return [
            {
                "student_name": row.student_name,
                "total_score": int(row.total_score or 0),
                "last_attempt": row.last_attempt
            }
            for row in rows
        ]

    def teacher_dashboard(self, db: Session) -> Dict[str, Any]:
        students = self.list_students(db)
        top = self.top_student(db)

        logger.info(f"Dashboard built: {len(students)} students, top={top['id'] if top else None}")

        return {"students": students, "top_student": top}


# Global instance
reporting_service = ReportingService()
