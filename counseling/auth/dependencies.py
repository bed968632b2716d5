from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from counseling.auth import jwt_handler
from counseling.core.context import RequestContext
from counseling.core.enums import Role
from counseling.database import get_db
from counseling.models.user import User

security = HTTPBearer()


def get_request_context(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> RequestContext:
    token = credentials.credentials
    try:
        payload = jwt_handler.decode_access_token(token)
    except Exception as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token subject")

    user = db.query(User).filter(User.user_id == user_id).first()
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")

    try:
        role = Role(user.role)
    except ValueError as exc:
        raise HTTPException(status_code=401, detail="Invalid user role") from exc

    return RequestContext(user_id=user.user_id, role=role, last_activity=user.last_activity)


def require_role(role: Role):
    label = 'administrator' if role == Role.ADMIN else role.value

    def dependency(context: RequestContext = Depends(get_request_context)) -> RequestContext:
        if context.role != role:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f'Unauthorized access - Please log in as {label}',
            )
        return context

    return dependency


require_student = require_role(Role.STUDENT)
require_counselor = require_role(Role.COUNSELOR)
require_admin = require_role(Role.ADMIN)
