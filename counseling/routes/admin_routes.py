import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from counseling.auth.dependencies import require_admin
from counseling.core.context import RequestContext
from counseling.core.enums import AppointmentStatus, Weekday
from counseling.database import get_db
from counseling.models.appointment import Appointment
from counseling.models.counselor import Counselor
from counseling.models.user import User
from counseling.repositories.counselor_directory import CounselorDirectory
from counseling.services.availability_service import (
    CounselorAvailabilityResult,
    CounselorScheduleEntry,
    available_counselors,
    schedules_by_day,
)
from counseling.services.report_service import (
    DEFAULT_REPORT_TYPE,
    REPORT_TYPES,
    HistoryReport,
    build_history_report,
    parse_report_month,
    report_range,
)

router = APIRouter(tags=['admin'])

logger = logging.getLogger(__name__)


class CounselorSchedulesResponse(BaseModel):
    status: str
    message: str
    schedules: dict[Weekday, list[CounselorScheduleEntry]]
    total_counselors: int


class AvailableCounselorsResponse(BaseModel):
    status: str
    message: str
    counselors: list[CounselorAvailabilityResult]
    day: Weekday
    time: str
    total_available: int


class HistoryAppointmentResponse(BaseModel):
    id: int
    student_id: str | None = None
    student_name: str | None = None
    counselor_preference: str | None = None
    counselor_name: str | None = None
    preferred_date: date | None = None
    preferred_time: str | None = None
    consultation_type: str | None = None
    purpose: str | None = None
    status: AppointmentStatus
    created_at: datetime | None = None


class HistoryResponse(BaseModel):
    status: str
    data: list[HistoryAppointmentResponse]


def error_response(status_code: int, message: str, **empty_results) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={'status': 'error', 'message': message, **empty_results},
    )


@router.get('/counselor-schedules', response_model=CounselorSchedulesResponse)
def get_counselor_schedules(
    context: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        directory = CounselorDirectory(db)
        schedules = schedules_by_day(directory)
        total_counselors = len(
            {entry.counselor_id for entries in schedules.values() for entry in entries}
        )
    except SQLAlchemyError:
        logger.exception('Error fetching counselor schedules.')
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            'Error retrieving counselor schedules',
            schedules={},
        )

    if not total_counselors:
        return CounselorSchedulesResponse(
            status='success',
            message='No counselors found',
            schedules={},
            total_counselors=0,
        )

    return CounselorSchedulesResponse(
        status='success',
        message='Counselor schedules retrieved successfully',
        schedules=schedules,
        total_counselors=total_counselors,
    )


@router.get('/counselors-by-time-slot', response_model=AvailableCounselorsResponse)
def get_counselors_by_time_slot(
    day: str | None = Query(default=None),
    time: str | None = Query(default=None),
    context: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    if not day or not time:
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            'Day and time parameters are required',
            counselors=[],
        )

    try:
        weekday = Weekday(day)
    except ValueError:
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            'Invalid day. Must be Monday through Friday',
            counselors=[],
        )

    try:
        counselors = available_counselors(CounselorDirectory(db), weekday, time)
    except SQLAlchemyError:
        logger.exception('Error fetching counselors for %s at %s.', day, time)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            'Error retrieving available counselors',
            counselors=[],
        )

    return AvailableCounselorsResponse(
        status='success',
        message='Available counselors retrieved successfully' if counselors else 'No counselors found',
        counselors=counselors,
        day=weekday,
        time=time,
        total_available=len(counselors),
    )


@router.get('/history', response_model=HistoryResponse)
def get_history(
    context: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        rows = db.query(Appointment, User.username, Counselor.name).outerjoin(
            User, User.user_id == Appointment.student_id,
        ).outerjoin(
            Counselor, Counselor.counselor_id == Appointment.counselor_preference,
        ).filter(
            Appointment.status == AppointmentStatus.COMPLETED.value,
        ).order_by(Appointment.created_at.desc()).all()
    except SQLAlchemyError:
        logger.exception('Error fetching appointment history.')
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            'Error retrieving appointment history',
            data=[],
        )

    return HistoryResponse(
        status='success',
        data=[
            HistoryAppointmentResponse(
                id=appointment.id,
                student_id=appointment.student_id,
                student_name=username,
                counselor_preference=appointment.counselor_preference,
                counselor_name=counselor_name,
                preferred_date=appointment.preferred_date,
                preferred_time=appointment.preferred_time,
                consultation_type=appointment.consultation_type,
                purpose=appointment.purpose,
                status=AppointmentStatus.COMPLETED,
                created_at=appointment.created_at,
            )
            for appointment, username, counselor_name in rows
        ],
    )


@router.get('/history/report', response_model=HistoryReport)
def get_history_report(
    month: str | None = Query(default=None),
    report_type: str = Query(default=DEFAULT_REPORT_TYPE, alias='type'),
    context: RequestContext = Depends(require_admin),
    db: Session = Depends(get_db),
):
    normalized_type = report_type.strip().lower()
    if normalized_type not in REPORT_TYPES:
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            f'Invalid report type. Must be one of: {", ".join(REPORT_TYPES)}',
        )

    try:
        first_day = parse_report_month(month) if month else date.today().replace(day=1)
    except ValueError:
        return error_response(status.HTTP_400_BAD_REQUEST, 'Invalid month. Use the YYYY-MM format.')

    range_start, range_end = report_range(first_day, normalized_type)

    try:
        appointments = db.query(
            Appointment.preferred_date,
            Appointment.preferred_time,
            Appointment.status,
        ).filter(
            Appointment.preferred_date >= range_start,
            Appointment.preferred_date <= range_end,
        ).all()
    except SQLAlchemyError:
        logger.exception('Error building %s history report for %s.', normalized_type, first_day)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, 'Error building history report')

    return build_history_report(appointments, first_day, normalized_type)
