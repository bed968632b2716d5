import json
import os
from datetime import date, datetime

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from counseling.core.context import RequestContext  # noqa: E402
from counseling.core.enums import Role, Weekday  # noqa: E402
from counseling.database import Base  # noqa: E402
from counseling.models.appointment import Appointment  # noqa: E402
from counseling.models.availability import CounselorAvailability  # noqa: E402
from counseling.models.counselor import Counselor  # noqa: E402
from counseling.models.user import User  # noqa: E402
from counseling.routes import admin_routes  # noqa: E402
from counseling.routes.admin_routes import (  # noqa: E402
    get_counselor_schedules,
    get_counselors_by_time_slot,
    get_history,
    get_history_report,
)

ADMIN = RequestContext(user_id='admin-1', role=Role.ADMIN)


@pytest.fixture
def admin_db():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def scheduled_db(admin_db):
    admin_db.add_all([
        Counselor(counselor_id='C-A', name='Ana Reyes', degree='MA', email='ana@example.edu', contact_number='0917'),
        Counselor(counselor_id='C-B', name='Bea Cruz', degree='PhD', email='bea@example.edu'),
        Counselor(counselor_id='C-X', name='Xavier Inactive', degree='MA', is_active=False),
    ])
    admin_db.add_all([
        CounselorAvailability(counselor_id='C-A', available_days='Monday', time_scheduled='08:00-11:00'),
        CounselorAvailability(counselor_id='C-B', available_days='Monday', time_scheduled='09:00,10:00'),
        CounselorAvailability(counselor_id='C-B', available_days='Wednesday', time_scheduled='13:00'),
        CounselorAvailability(counselor_id='C-X', available_days='Monday', time_scheduled=None),
    ])
    admin_db.commit()
    return admin_db


def _body(response) -> dict:
    return json.loads(response.body)


def test_counselors_by_time_slot_returns_range_match_only(scheduled_db) -> None:
    response = get_counselors_by_time_slot(day='Monday', time='09:30', context=ADMIN, db=scheduled_db)

    assert response.status == 'success'
    assert [counselor.counselor_id for counselor in response.counselors] == ['C-A']
    assert response.counselors[0].display_name == 'Ana Reyes, MA'
    assert response.counselors[0].contact_number == '0917'
    assert response.day == Weekday.MONDAY
    assert response.total_available == 1


def test_counselors_by_time_slot_returns_both_on_shared_time(scheduled_db) -> None:
    response = get_counselors_by_time_slot(day='Monday', time='10:00', context=ADMIN, db=scheduled_db)

    assert [counselor.name for counselor in response.counselors] == ['Ana Reyes', 'Bea Cruz']
    assert response.total_available == 2


def test_counselors_by_time_slot_empty_result_is_success(scheduled_db) -> None:
    response = get_counselors_by_time_slot(day='Tuesday', time='10:00', context=ADMIN, db=scheduled_db)

    assert response.status == 'success'
    assert response.message == 'No counselors found'
    assert response.counselors == []


@pytest.mark.parametrize('day', ['Saturday', 'Sunday', 'monday', 'Funday'])
def test_counselors_by_time_slot_rejects_non_weekdays_without_database(day: str) -> None:
    response = get_counselors_by_time_slot(day=day, time='10:00', context=ADMIN, db=None)

    assert response.status_code == 400
    assert _body(response) == {
        'status': 'error',
        'message': 'Invalid day. Must be Monday through Friday',
        'counselors': [],
    }


@pytest.mark.parametrize(('day', 'time'), [(None, '10:00'), ('Monday', None), ('', ''), ('Monday', '')])
def test_counselors_by_time_slot_requires_day_and_time(day, time) -> None:
    response = get_counselors_by_time_slot(day=day, time=time, context=ADMIN, db=None)

    assert response.status_code == 400
    assert _body(response)['message'] == 'Day and time parameters are required'


def test_counselors_by_time_slot_hides_database_errors(scheduled_db, monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(*_args, **_kwargs):
        raise OperationalError('SELECT', {}, Exception('connection lost'))

    monkeypatch.setattr(admin_routes, 'available_counselors', fail)

    response = get_counselors_by_time_slot(day='Monday', time='10:00', context=ADMIN, db=scheduled_db)

    assert response.status_code == 500
    assert _body(response) == {
        'status': 'error',
        'message': 'Error retrieving available counselors',
        'counselors': [],
    }


def test_counselor_schedules_group_active_counselors_by_day(scheduled_db) -> None:
    response = get_counselor_schedules(context=ADMIN, db=scheduled_db)

    assert response.status == 'success'
    assert response.total_counselors == 2
    assert [entry.name for entry in response.schedules[Weekday.MONDAY]] == ['Ana Reyes', 'Bea Cruz']
    assert [entry.counselor_id for entry in response.schedules[Weekday.WEDNESDAY]] == ['C-B']
    assert response.schedules[Weekday.WEDNESDAY][0].time_slots == ['13:00']
    assert response.schedules[Weekday.FRIDAY] == []


def test_counselor_schedules_skip_rows_stored_with_non_weekdays(scheduled_db) -> None:
    scheduled_db.execute(
        text(
            "INSERT INTO counselor_availability (counselor_id, available_days, time_scheduled) "
            "VALUES ('C-A', 'Saturday', '09:00'), ('C-B', 'friday', '10:00')"
        )
    )
    scheduled_db.commit()

    response = get_counselor_schedules(context=ADMIN, db=scheduled_db)

    assert response.status == 'success'
    assert set(response.schedules) == set(Weekday)
    assert response.schedules[Weekday.FRIDAY] == []
    assert [entry.name for entry in response.schedules[Weekday.MONDAY]] == ['Ana Reyes', 'Bea Cruz']


def test_counselor_schedules_without_counselors_is_informational(admin_db) -> None:
    response = get_counselor_schedules(context=ADMIN, db=admin_db)

    assert response.status == 'success'
    assert response.message == 'No counselors found'
    assert response.schedules == {}


def test_counselor_schedules_hides_database_errors(admin_db, monkeypatch: pytest.MonkeyPatch) -> None:
    def fail(_directory):
        raise OperationalError('SELECT', {}, Exception('connection lost'))

    monkeypatch.setattr(admin_routes, 'schedules_by_day', fail)

    response = get_counselor_schedules(context=ADMIN, db=admin_db)

    assert response.status_code == 500
    assert _body(response)['schedules'] == {}


def test_history_lists_completed_appointments_newest_first(admin_db) -> None:
    admin_db.add_all([
        User(user_id='S1', username='student1', email='s1@example.edu', role='student'),
        Counselor(counselor_id='C-A', name='Ana Reyes', degree='MA'),
    ])
    admin_db.add_all([
        Appointment(student_id='S1', counselor_preference='C-A', status='completed',
                    preferred_date=date(2026, 3, 2), preferred_time='10:00 AM', created_at=datetime(2026, 2, 1)),
        Appointment(student_id='S1', counselor_preference='C-A', status='completed',
                    preferred_date=date(2026, 3, 9), preferred_time='11:00 AM', created_at=datetime(2026, 2, 5)),
        Appointment(student_id='S1', counselor_preference='C-A', status='pending',
                    preferred_date=date(2026, 3, 10), preferred_time='11:00 AM'),
    ])
    admin_db.commit()

    response = get_history(context=ADMIN, db=admin_db)

    assert [item.preferred_date for item in response.data] == [date(2026, 3, 9), date(2026, 3, 2)]
    assert response.data[0].student_name == 'student1'
    assert response.data[0].counselor_name == 'Ana Reyes'


def test_history_report_counts_month(admin_db) -> None:
    admin_db.add_all([
        Appointment(student_id='S1', status='completed', preferred_date=date(2026, 3, 2), preferred_time='10:00 AM'),
        Appointment(student_id='S1', status='approved', preferred_date=date(2026, 3, 2), preferred_time='10:30 AM'),
        Appointment(student_id='S1', status='pending', preferred_date=date(2026, 4, 2), preferred_time='10:30 AM'),
    ])
    admin_db.commit()

    report = get_history_report(month='2026-03', report_type='daily', context=ADMIN, db=admin_db)

    assert report.labels == ['2']
    assert report.completed == [1]
    assert report.approved == [1]
    assert report.total_pending == 0


def test_history_report_rejects_unknown_type() -> None:
    response = get_history_report(month='2026-03', report_type='hourly', context=ADMIN, db=None)

    assert response.status_code == 400


def test_history_report_rejects_bad_month() -> None:
    response = get_history_report(month='March', report_type='monthly', context=ADMIN, db=None)

    assert response.status_code == 400
    assert _body(response)['message'] == 'Invalid month. Use the YYYY-MM format.'
