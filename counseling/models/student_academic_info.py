"""Student academic information model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from counseling.database import Base


class StudentAcademicInfo(Base):
    """Course and year level recorded for a student."""
    __tablename__ = "student_academic_info"

    id = Column(Integer, primary_key=True)
    student_id = Column(String, ForeignKey("users.user_id"), unique=True, index=True)
    course = Column(String(50))
    year_level = Column(String(10))
    academic_status = Column(String(50))
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)
