"""Records passed between the notification store and the feed service."""

from datetime import datetime

from pydantic import BaseModel

from counseling.core.enums import NotificationType

DEFAULT_SENDER_NAME = 'Counselor'


class RawNotification(BaseModel):
    type: NotificationType
    related_id: int
    title: str
    message: str
    created_at: datetime


class NotificationEvent(RawNotification):
    is_read: bool = False
    counselor_id: str | None = None
    counselor_name: str | None = None


class ReceivedMessage(BaseModel):
    message_id: int
    sender_id: str
    counselor_name: str | None = None
    username: str | None = None

    @property
    def display_name(self) -> str:
        return self.counselor_name or self.username or DEFAULT_SENDER_NAME


class NotificationFeed(BaseModel):
    notifications: list[NotificationEvent]
    unread_count: int
