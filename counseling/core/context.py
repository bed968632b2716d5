from datetime import datetime

from pydantic import BaseModel

from counseling.core.enums import Role


class RequestContext(BaseModel):
    """Caller identity handed to every service call in place of session state."""

    user_id: str
    role: Role
    last_activity: datetime | None = None
