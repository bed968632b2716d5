"""Notification feed assembled from appointments, events, announcements and messages.

There is no notifications table. A user's feed is every event newer than
their ``last_activity`` watermark, and "mark as read" simply moves that
watermark to now.
"""

import logging
from datetime import datetime, timedelta

from counseling.core import config
from counseling.core.context import RequestContext
from counseling.core.enums import NotificationType, Role
from counseling.schemas.notification_schema import NotificationEvent, NotificationFeed, RawNotification

logger = logging.getLogger(__name__)


def resolve_watermark(context: RequestContext, now: datetime) -> datetime:
    if context.last_activity is not None:
        return context.last_activity
    return now - timedelta(days=config.NOTIFICATION_FALLBACK_DAYS)


def build_event(raw: RawNotification, last_activity: datetime | None) -> NotificationEvent:
    is_read = last_activity is not None and raw.created_at <= last_activity
    return NotificationEvent(**raw.model_dump(), is_read=is_read)


def enrich_message_notifications(store, notifications: list[NotificationEvent], receiver_id: str) -> list[NotificationEvent]:
    """Keep only messages the user received and title them with the sender's name.

    Message records with no matching received message (for example ones the
    user sent) are dropped. If the lookup itself fails the records are
    returned untouched.
    """
    message_ids = [
        notification.related_id
        for notification in notifications
        if notification.type == NotificationType.MESSAGE
    ]
    if not message_ids:
        return notifications

    try:
        received = store.get_received_messages_by_ids(message_ids, receiver_id)
    except Exception:
        logger.warning('Message notification enrichment failed for user %s.', receiver_id, exc_info=True)
        return notifications

    received_by_id = {message.message_id: message for message in received}

    enriched: list[NotificationEvent] = []
    for notification in notifications:
        if notification.type != NotificationType.MESSAGE:
            enriched.append(notification)
            continue

        message = received_by_id.get(notification.related_id)
        if message is None:
            continue

        enriched.append(
            notification.model_copy(
                update={
                    'title': f'New Message from Counselor {message.display_name}',
                    'counselor_id': message.sender_id,
                    'counselor_name': message.display_name,
                }
            )
        )

    return enriched


def get_notification_feed(store, context: RequestContext, now: datetime | None = None) -> NotificationFeed:
    now = now or datetime.now()
    since = resolve_watermark(context, now)

    raw_notifications = store.get_recent_events(context.user_id, since)
    notifications = sorted(
        (build_event(raw, context.last_activity) for raw in raw_notifications),
        key=lambda notification: notification.created_at,
        reverse=True,
    )
    notifications = enrich_message_notifications(store, notifications, context.user_id)

    # Counted independently of the feed, so dropped message records are still included.
    unread_count = store.get_unread_count(context.user_id)

    return NotificationFeed(notifications=notifications, unread_count=unread_count)


def present_feed_for_role(feed: NotificationFeed, role: Role) -> NotificationFeed:
    """Students never see message notifications; everyone else sees the whole feed."""
    if role != Role.STUDENT:
        return feed

    displayable = [
        notification
        for notification in feed.notifications
        if notification.type != NotificationType.MESSAGE
    ]
    unread_count = sum(1 for notification in displayable if not notification.is_read)
    return NotificationFeed(notifications=displayable, unread_count=unread_count)


def get_unread_count_for_role(store, context: RequestContext) -> int:
    return store.get_unread_count(context.user_id, include_messages=context.role != Role.STUDENT)


def mark_notifications_read(store, context: RequestContext, now: datetime | None = None) -> datetime:
    """Advance the watermark; every notification up to ``now`` becomes read."""
    now = now or datetime.now()
    store.update_last_activity(context.user_id, now)
    return now
