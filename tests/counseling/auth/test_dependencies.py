import os
from datetime import datetime

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from counseling.auth import jwt_handler  # noqa: E402
from counseling.auth.dependencies import get_request_context, require_admin, require_student  # noqa: E402
from counseling.core.context import RequestContext  # noqa: E402
from counseling.core.enums import Role  # noqa: E402
from counseling.database import Base  # noqa: E402
from counseling.models.user import User  # noqa: E402


@pytest.fixture
def user_db():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=[User.__table__])

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine, tables=[User.__table__])


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme='Bearer', credentials=token)


def test_request_context_carries_user_watermark(user_db) -> None:
    last_activity = datetime(2026, 3, 1, 8, 30)
    user_db.add(User(user_id='S1', username='student1', email='s1@example.edu', role='student',
                     last_activity=last_activity))
    user_db.commit()

    context = get_request_context(credentials=_credentials(jwt_handler.create_access_token('S1')), db=user_db)

    assert context == RequestContext(user_id='S1', role=Role.STUDENT, last_activity=last_activity)


def test_request_context_rejects_garbage_token(user_db) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_request_context(credentials=_credentials('not-a-token'), db=user_db)

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'Invalid token'


def test_request_context_rejects_unknown_user(user_db) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_request_context(credentials=_credentials(jwt_handler.create_access_token('ghost')), db=user_db)

    assert exception_info.value.detail == 'User not found'


def test_request_context_rejects_unknown_role(user_db) -> None:
    user_db.add(User(user_id='G1', username='guest', email='g@example.edu', role='guest'))
    user_db.commit()

    with pytest.raises(HTTPException) as exception_info:
        get_request_context(credentials=_credentials(jwt_handler.create_access_token('G1')), db=user_db)

    assert exception_info.value.detail == 'Invalid user role'


def test_role_gate_rejects_other_roles() -> None:
    student = RequestContext(user_id='S1', role=Role.STUDENT)

    assert require_student(context=student) is student
    with pytest.raises(HTTPException) as exception_info:
        require_admin(context=student)

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'Unauthorized access - Please log in as administrator'


def test_access_token_round_trip_keeps_subject_and_role() -> None:
    payload = jwt_handler.decode_access_token(jwt_handler.create_access_token('C1', role='counselor'))

    assert payload['sub'] == 'C1'
    assert payload['role'] == 'counselor'
