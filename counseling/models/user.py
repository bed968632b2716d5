"""User model definitions."""

from sqlalchemy import Column, DateTime, String
from counseling.database import Base


class User(Base):
    """Represents a portal account (student, counselor or admin)."""
    __tablename__ = "users"

    user_id = Column(String, primary_key=True, index=True)
    username = Column(String)
    email = Column(String, unique=True, index=True)
    role = Column(String)  # student/counselor/admin
    # Read cursor for notifications; advanced by mark-as-read.
    last_activity = Column(DateTime, nullable=True)
