"""Counselor model definitions."""

from sqlalchemy import Boolean, Column, String
from counseling.database import Base


class Counselor(Base):
    """Represents a counselor profile. ``counselor_id`` shares the users id space."""
    __tablename__ = "counselors"

    counselor_id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    degree = Column(String)
    email = Column(String)
    contact_number = Column(String)
    profile_picture = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)
