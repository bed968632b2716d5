"""Closed vocabularies shared by models, services and routes."""

from enum import Enum


class Weekday(str, Enum):
    MONDAY = 'Monday'
    TUESDAY = 'Tuesday'
    WEDNESDAY = 'Wednesday'
    THURSDAY = 'Thursday'
    FRIDAY = 'Friday'


class Role(str, Enum):
    STUDENT = 'student'
    COUNSELOR = 'counselor'
    ADMIN = 'admin'


class AppointmentStatus(str, Enum):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


class NotificationType(str, Enum):
    APPOINTMENT = 'appointment'
    EVENT = 'event'
    ANNOUNCEMENT = 'announcement'
    MESSAGE = 'message'


# Monday..Friday in display order; weekends are never scheduled.
WEEKDAYS = tuple(Weekday)
