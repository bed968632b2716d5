"""SQL side of the notification feed: raw events, message lookups and the watermark."""

from datetime import datetime, timedelta

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from counseling.core import config
from counseling.core.enums import NotificationType, Role
from counseling.models.announcement import Announcement, Event
from counseling.models.appointment import Appointment
from counseling.models.counselor import Counselor
from counseling.models.message import Message
from counseling.models.user import User
from counseling.schemas.notification_schema import RawNotification, ReceivedMessage


def appointment_notification(appointment: Appointment) -> RawNotification:
    status = (appointment.status or 'pending').capitalize()
    return RawNotification(
        type=NotificationType.APPOINTMENT,
        related_id=appointment.id,
        title=f'Appointment {status}',
        message=f'Appointment on {appointment.preferred_date} at {appointment.preferred_time} is {status.lower()}.',
        created_at=appointment.updated_at or appointment.created_at,
    )


def announcement_notification(announcement: Announcement) -> RawNotification:
    return RawNotification(
        type=NotificationType.ANNOUNCEMENT,
        related_id=announcement.id,
        title=announcement.title or 'Announcement',
        message=announcement.content or '',
        created_at=announcement.created_at,
    )


def event_notification(event: Event) -> RawNotification:
    return RawNotification(
        type=NotificationType.EVENT,
        related_id=event.id,
        title=event.title or 'Event',
        message=event.description or '',
        created_at=event.created_at,
    )


def message_notification(message: Message) -> RawNotification:
    return RawNotification(
        type=NotificationType.MESSAGE,
        related_id=message.message_id,
        title='New Message',
        message=message.message_text or '',
        created_at=message.created_at,
    )


class NotificationStore:
    def __init__(self, db: Session):
        self.db = db

    def _get_user(self, user_id: str) -> User | None:
        return self.db.query(User).filter(User.user_id == user_id).first()

    def _appointment_query(self, user: User, since: datetime):
        query = self.db.query(Appointment).filter(Appointment.updated_at > since)

        if user.role == Role.COUNSELOR.value:
            return query.filter(Appointment.counselor_preference == user.user_id)
        if user.role == Role.STUDENT.value:
            return query.filter(Appointment.student_id == user.user_id)
        return None

    def _message_query(self, user: User, since: datetime):
        # Sent and received; the feed drops the sent ones during enrichment.
        return self.db.query(Message).filter(
            Message.created_at > since,
            or_(Message.sender_id == user.user_id, Message.receiver_id == user.user_id),
        )

    def _announcement_query(self, since: datetime):
        return self.db.query(Announcement).filter(Announcement.created_at > since)

    def _event_query(self, since: datetime):
        return self.db.query(Event).filter(Event.created_at > since)

    def get_recent_events(self, user_id: str, since: datetime) -> list[RawNotification]:
        user = self._get_user(user_id)
        if user is None:
            return []

        notifications: list[RawNotification] = []

        appointment_query = self._appointment_query(user, since)
        if appointment_query is not None:
            notifications.extend(appointment_notification(row) for row in appointment_query.all())

        notifications.extend(announcement_notification(row) for row in self._announcement_query(since).all())
        notifications.extend(event_notification(row) for row in self._event_query(since).all())
        notifications.extend(message_notification(row) for row in self._message_query(user, since).all())

        return notifications

    def get_received_messages_by_ids(self, message_ids: list[int], receiver_id: str) -> list[ReceivedMessage]:
        try:
            rows = self.db.query(
                Message.message_id,
                Message.sender_id,
                Counselor.name,
                User.username,
            ).select_from(Message).outerjoin(
                User, User.user_id == Message.sender_id,
            ).outerjoin(
                Counselor, Counselor.counselor_id == Message.sender_id,
            ).filter(
                Message.message_id.in_(message_ids),
                Message.receiver_id == receiver_id,
            ).all()
        except SQLAlchemyError:
            # Leave the session usable for the unread count that follows.
            self.db.rollback()
            raise

        return [
            ReceivedMessage(
                message_id=message_id,
                sender_id=sender_id,
                counselor_name=counselor_name,
                username=username,
            )
            for message_id, sender_id, counselor_name, username in rows
        ]

    def get_unread_count(self, user_id: str, include_messages: bool = True) -> int:
        """Count events strictly newer than the stored ``last_activity``."""
        user = self._get_user(user_id)
        if user is None:
            return 0

        since = user.last_activity or datetime.now() - timedelta(days=config.NOTIFICATION_FALLBACK_DAYS)

        count = self._announcement_query(since).count() + self._event_query(since).count()

        appointment_query = self._appointment_query(user, since)
        if appointment_query is not None:
            count += appointment_query.count()

        if include_messages:
            count += self._message_query(user, since).count()

        return count

    def update_last_activity(self, user_id: str, timestamp: datetime) -> None:
        self.db.query(User).filter(User.user_id == user_id).update({User.last_activity: timestamp})
        self.db.commit()
