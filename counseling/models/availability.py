"""Availability model definitions."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import validates

from counseling.core.enums import Weekday
from counseling.database import Base


class CounselorAvailability(Base):
    """One declared time slot for a counselor on a weekday."""
    __tablename__ = "counselor_availability"

    id = Column(Integer, primary_key=True)
    counselor_id = Column(String, ForeignKey("counselors.counselor_id"), index=True)
    available_days = Column(String, nullable=False)
    time_scheduled = Column(String, nullable=True)

    @validates('available_days')
    def validate_available_days(self, key, value):
        return Weekday(value).value
