import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from counseling.auth.dependencies import require_counselor, require_student
from counseling.core.context import RequestContext
from counseling.database import get_db
from counseling.repositories.notification_store import NotificationStore
from counseling.schemas.notification_schema import NotificationEvent
from counseling.services.notification_service import (
    get_notification_feed,
    get_unread_count_for_role,
    mark_notifications_read,
    present_feed_for_role,
)

router = APIRouter(tags=['notifications'])

logger = logging.getLogger(__name__)


class NotificationFeedResponse(BaseModel):
    status: str
    notifications: list[NotificationEvent]
    unread_count: int


class MarkReadResponse(BaseModel):
    status: str
    message: str


class UnreadCountResponse(BaseModel):
    status: str
    unread_count: int


def load_feed(context: RequestContext, db: Session):
    try:
        feed = get_notification_feed(NotificationStore(db), context)
    except SQLAlchemyError:
        logger.exception('Error loading notifications for user %s.', context.user_id)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={'status': 'error', 'message': 'An internal server error occurred.', 'notifications': []},
        )

    feed = present_feed_for_role(feed, context.role)
    return NotificationFeedResponse(
        status='success',
        notifications=feed.notifications,
        unread_count=feed.unread_count,
    )


def mark_read(context: RequestContext, db: Session):
    try:
        mark_notifications_read(NotificationStore(db), context)
    except SQLAlchemyError:
        db.rollback()
        logger.exception('Error marking notifications as read for user %s.', context.user_id)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={'status': 'error', 'message': 'Failed to mark notifications as read'},
        )

    return MarkReadResponse(
        status='success',
        message='Notifications marked as read by updating last activity time.',
    )


def unread_count(context: RequestContext, db: Session):
    try:
        count = get_unread_count_for_role(NotificationStore(db), context)
    except SQLAlchemyError:
        logger.exception('Error getting unread count for user %s.', context.user_id)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={'status': 'error', 'message': 'Failed to get unread count'},
        )

    return UnreadCountResponse(status='success', unread_count=count)


@router.get('/student/notifications', response_model=NotificationFeedResponse)
def list_student_notifications(
    context: RequestContext = Depends(require_student),
    db: Session = Depends(get_db),
):
    return load_feed(context, db)


@router.post('/student/notifications/mark-read', response_model=MarkReadResponse)
def mark_student_notifications_read(
    context: RequestContext = Depends(require_student),
    db: Session = Depends(get_db),
):
    return mark_read(context, db)


@router.get('/student/notifications/unread-count', response_model=UnreadCountResponse)
def get_student_unread_count(
    context: RequestContext = Depends(require_student),
    db: Session = Depends(get_db),
):
    return unread_count(context, db)


@router.get('/counselor/notifications', response_model=NotificationFeedResponse)
def list_counselor_notifications(
    context: RequestContext = Depends(require_counselor),
    db: Session = Depends(get_db),
):
    return load_feed(context, db)


@router.post('/counselor/notifications/mark-read', response_model=MarkReadResponse)
def mark_counselor_notifications_read(
    context: RequestContext = Depends(require_counselor),
    db: Session = Depends(get_db),
):
    return mark_read(context, db)


@router.get('/counselor/notifications/unread-count', response_model=UnreadCountResponse)
def get_counselor_unread_count(
    context: RequestContext = Depends(require_counselor),
    db: Session = Depends(get_db),
):
    return unread_count(context, db)
