"""Appointment model definitions."""

from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import validates

from counseling.core.enums import AppointmentStatus
from counseling.database import Base


class Appointment(Base):
    """Represents a student's counseling appointment request."""
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True)
    student_id = Column(String, ForeignKey("users.user_id"), index=True)
    preferred_date = Column(Date)
    preferred_time = Column(String)
    consultation_type = Column(String)
    purpose = Column(Text)
    # Free-text counselor id chosen by the student; not enforced as a foreign key.
    counselor_preference = Column(String, index=True)
    status = Column(String, default=AppointmentStatus.PENDING.value)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    @validates('status')
    def validate_status(self, key, value):
        return AppointmentStatus(value).value
