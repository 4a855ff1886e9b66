"""
Pydantic schemas for reporting endpoints
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class StudentSummary(BaseModel):
    id: int
    username: str


class TopStudent(BaseModel):
    """Owner of the highest single result score"""
    id: int
    username: str
    score: int


class TeacherDashboard(BaseModel):
    students: List[StudentSummary]
    top_student: Optional[TopStudent] = Field(None, serialization_alias="topStudent")


class StudentPerformance(BaseModel):
    """Per-student totals across all recorded answers"""
    student_name: str
    total_score: int
    last_attempt: Optional[datetime] = None
