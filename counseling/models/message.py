"""Message model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text
from counseling.database import Base


class Message(Base):
    """A direct message between two users."""
    __tablename__ = "messages"

    message_id = Column(Integer, primary_key=True)
    sender_id = Column(String, index=True)
    receiver_id = Column(String, index=True)
    message_text = Column(Text)
    created_at = Column(DateTime, default=datetime.now)
