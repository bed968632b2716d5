"""Which counselors are scheduled on which weekdays, and who is free at a given time."""

from pydantic import BaseModel

from counseling.core.enums import WEEKDAYS, Weekday
from counseling.services.time_slots import is_within_slot


class CounselorProfile(BaseModel):
    counselor_id: str
    name: str
    degree: str | None = None
    email: str | None = None
    contact_number: str | None = None
    profile_picture: str | None = None

    class Config:
        from_attributes = True

    @property
    def display_name(self) -> str:
        if self.degree:
            return f'{self.name}, {self.degree}'
        return self.name


class CounselorScheduleEntry(BaseModel):
    counselor_id: str
    name: str
    degree: str | None = None
    profile_picture: str | None = None
    time_slots: list[str]
    display_name: str


class CounselorAvailabilityResult(CounselorScheduleEntry):
    # Every stored slot for the day, blank ones included.
    time_slots: list[str | None]
    email: str | None = None
    contact_number: str | None = None


def visible_slots(slots: list[str | None]) -> list[str]:
    return [slot for slot in slots if slot]


def sort_by_name(entries: list[CounselorScheduleEntry]) -> None:
    # list.sort is stable, so equal names keep retrieval order.
    entries.sort(key=lambda entry: entry.name)


def schedules_by_day(directory) -> dict[Weekday, list[CounselorScheduleEntry]]:
    schedules: dict[Weekday, list[CounselorScheduleEntry]] = {day: [] for day in WEEKDAYS}

    for row in directory.get_active_counselors():
        counselor = CounselorProfile.model_validate(row)
        grouped_slots = directory.get_availability_grouped_by_day(counselor.counselor_id)

        for day, slots in grouped_slots.items():
            if day not in schedules:
                continue

            schedules[day].append(
                CounselorScheduleEntry(
                    counselor_id=counselor.counselor_id,
                    name=counselor.name,
                    degree=counselor.degree,
                    profile_picture=counselor.profile_picture,
                    time_slots=visible_slots(slots),
                    display_name=counselor.display_name,
                )
            )

    for entries in schedules.values():
        sort_by_name(entries)

    return schedules


def available_counselors(directory, day: Weekday, requested_time: str) -> list[CounselorAvailabilityResult]:
    """Counselors with at least one slot on ``day`` that covers ``requested_time``."""
    results: list[CounselorAvailabilityResult] = []

    for row in directory.get_active_counselors():
        counselor = CounselorProfile.model_validate(row)
        slots = directory.get_availability_by_day(counselor.counselor_id, day)

        if not any(is_within_slot(requested_time, slot) for slot in slots):
            continue

        results.append(
            CounselorAvailabilityResult(
                counselor_id=counselor.counselor_id,
                name=counselor.name,
                degree=counselor.degree,
                email=counselor.email,
                contact_number=counselor.contact_number,
                profile_picture=counselor.profile_picture,
                time_slots=list(slots),
                display_name=counselor.display_name,
            )
        )

    sort_by_name(results)
    return results
