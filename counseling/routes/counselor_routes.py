import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from counseling.auth.dependencies import require_counselor
from counseling.core import config
from counseling.core.context import RequestContext
from counseling.core.enums import AppointmentStatus
from counseling.database import get_db
from counseling.models.appointment import Appointment
from counseling.models.student_academic_info import StudentAcademicInfo
from counseling.models.user import User

router = APIRouter(tags=['counselor'])

logger = logging.getLogger(__name__)


class PendingAppointmentResponse(BaseModel):
    id: int
    student_id: str | None = None
    preferred_date: date | None = None
    preferred_time: str | None = None
    consultation_type: str | None = None
    purpose: str | None = None
    counselor_preference: str | None = None
    status: AppointmentStatus
    created_at: datetime | None = None
    username: str | None = None
    user_email: str | None = None
    course_year: str | None = None


class PendingAppointmentsResponse(BaseModel):
    status: str
    appointments: list[PendingAppointmentResponse]
    count: int


def format_course_year(course: str | None, year_level: str | None) -> str | None:
    if course is None or year_level is None:
        return None
    return f'{course} - {year_level}'


@router.get('/dashboard/recent-pending-appointments', response_model=PendingAppointmentsResponse)
def get_recent_pending_appointments(
    context: RequestContext = Depends(require_counselor),
    db: Session = Depends(get_db),
):
    try:
        rows = db.query(
            Appointment,
            User.username,
            User.email,
            StudentAcademicInfo.course,
            StudentAcademicInfo.year_level,
        ).outerjoin(
            User, User.user_id == Appointment.student_id,
        ).outerjoin(
            StudentAcademicInfo, StudentAcademicInfo.student_id == User.user_id,
        ).filter(
            Appointment.status == AppointmentStatus.PENDING.value,
            Appointment.counselor_preference == context.user_id,
        ).order_by(
            Appointment.created_at.desc(),
        ).limit(config.RECENT_PENDING_APPOINTMENTS_LIMIT).all()
    except SQLAlchemyError:
        logger.exception('Error fetching pending appointments for counselor %s.', context.user_id)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                'status': 'error',
                'message': 'An error occurred while fetching appointments',
                'appointments': [],
            },
        )

    appointments = [
        PendingAppointmentResponse(
            id=appointment.id,
            student_id=appointment.student_id,
            preferred_date=appointment.preferred_date,
            preferred_time=appointment.preferred_time,
            consultation_type=appointment.consultation_type,
            purpose=appointment.purpose,
            counselor_preference=appointment.counselor_preference,
            status=AppointmentStatus.PENDING,
            created_at=appointment.created_at,
            username=username,
            user_email=email,
            course_year=format_course_year(course, year_level),
        )
        for appointment, username, email, course, year_level in rows
    ]
    logger.info('Fetched %d pending appointments for counselor %s.', len(appointments), context.user_id)

    return PendingAppointmentsResponse(status='success', appointments=appointments, count=len(appointments))
