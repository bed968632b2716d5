"""Announcement and event model definitions."""

from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Integer, String, Text
from counseling.database import Base


class Announcement(Base):
    __tablename__ = "announcements"

    id = Column(Integer, primary_key=True)
    title = Column(String)
    content = Column(Text)
    created_at = Column(DateTime, default=datetime.now)


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True)
    title = Column(String)
    description = Column(Text)
    event_date = Column(Date)
    created_at = Column(DateTime, default=datetime.now)
