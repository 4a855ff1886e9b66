"""
Teacher reporting API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
import logging

from quiz_api.api.deps import require_teacher
from quiz_api.database import get_db
from quiz_api.schemas.auth import Identity
from quiz_api.schemas.reports import StudentPerformance, TeacherDashboard
from quiz_api.services.reporting_service import reporting_service

router = APIRouter(tags=["reports"])
logger = logging.getLogger(__name__)


@router.get("/teacher-dashboard", response_model=TeacherDashboard)
def get_teacher_dashboard(
    user: Identity = Depends(require_teacher),
    db: Session = Depends(get_db)
):
    """
    Student roster and the top-scoring student

    topStudent is null until at least one result exists.
    """
    logger.info(f"Building teacher dashboard for {user.id}")
    return reporting_service.teacher_dashboard(db)


@router.get("/student-performance", response_model=List[StudentPerformance])
def get_student_performance(
    user: Identity = Depends(require_teacher),
    db: Session = Depends(get_db)
):
    """Correct answers and last attempt per student, best first"""
    return reporting_service.student_performance(db)
