import logging

from sqlalchemy.orm import Session

from counseling.core.enums import Weekday
from counseling.models.availability import CounselorAvailability
from counseling.models.counselor import Counselor

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = {day.value for day in Weekday}


class CounselorDirectory:
    """Read access to counselor profiles and their weekday slots."""

    def __init__(self, db: Session):
        self.db = db

    def get_active_counselors(self) -> list[Counselor]:
        return self.db.query(Counselor).filter(
            Counselor.is_active.is_(True),
        ).order_by(Counselor.counselor_id.asc()).all()

    def get_availability_grouped_by_day(self, counselor_id: str) -> dict[Weekday, list[str | None]]:
        rows = self.db.query(CounselorAvailability.available_days, CounselorAvailability.time_scheduled).filter(
            CounselorAvailability.counselor_id == counselor_id,
        ).order_by(CounselorAvailability.id.asc()).all()

        grouped: dict[Weekday, list[str | None]] = {}
        for available_day, time_scheduled in rows:
            # Rows written outside the ORM can carry weekend or misspelled days.
            if available_day not in WEEKDAY_NAMES:
                logger.warning('Skipping availability for counselor %s on unknown day %r.', counselor_id, available_day)
                continue
            grouped.setdefault(Weekday(available_day), []).append(time_scheduled)

        return grouped

    def get_availability_by_day(self, counselor_id: str, day: Weekday) -> list[str | None]:
        rows = self.db.query(CounselorAvailability.time_scheduled).filter(
            CounselorAvailability.counselor_id == counselor_id,
            CounselorAvailability.available_days == day.value,
        ).order_by(CounselorAvailability.id.asc()).all()

        return [time_scheduled for (time_scheduled,) in rows]
