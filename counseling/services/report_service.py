"""Appointment history charts: per-status counts bucketed by day, week, hour or year."""

import calendar
from collections import Counter
from datetime import date, datetime, timedelta

from pydantic import BaseModel

from counseling.core.enums import AppointmentStatus
from counseling.services.time_slots import MINUTES_PER_HOUR, parse_time_to_minutes

REPORT_TYPES = ('daily', 'weekly', 'monthly', 'yearly')
DEFAULT_REPORT_TYPE = 'monthly'
YEARLY_REPORT_SPAN = 3


class HistoryReport(BaseModel):
    labels: list[str]
    completed: list[int]
    approved: list[int]
    rejected: list[int]
    pending: list[int]
    cancelled: list[int]
    total_completed: int
    total_approved: int
    total_rejected: int
    total_pending: int
    total_cancelled: int


def parse_report_month(month: str) -> date:
    """``YYYY-MM`` to the first day of that month. Raises ValueError otherwise."""
    return datetime.strptime(month.strip(), '%Y-%m').date()


def month_bounds(first_day: date) -> tuple[date, date]:
    last_day_number = calendar.monthrange(first_day.year, first_day.month)[1]
    return first_day, first_day.replace(day=last_day_number)


def report_range(first_day: date, report_type: str) -> tuple[date, date]:
    month_start, month_end = month_bounds(first_day)

    if report_type == 'weekly':
        week_start = month_start - timedelta(days=month_start.weekday())
        week_end = month_end + timedelta(days=6 - month_end.weekday())
        return week_start, week_end

    if report_type == 'yearly':
        return date(first_day.year - YEARLY_REPORT_SPAN + 1, 1, 1), date(first_day.year, 12, 31)

    return month_start, month_end


def hour_of(preferred_time: str | None) -> int | None:
    minutes = parse_time_to_minutes(preferred_time)
    if minutes is None:
        return None
    return minutes // MINUTES_PER_HOUR


def _weekly_buckets(range_start: date, range_end: date) -> list[tuple[date, date]]:
    weeks = []
    week_start = range_start
    while week_start <= range_end:
        weeks.append((week_start, week_start + timedelta(days=6)))
        week_start += timedelta(days=7)
    return weeks


def build_history_report(appointments, first_day: date, report_type: str) -> HistoryReport:
    """Bucket ``appointments`` (rows with preferred_date, preferred_time and status)."""
    range_start, range_end = report_range(first_day, report_type)
    month_start, month_end = month_bounds(first_day)

    buckets: dict[object, Counter] = {}
    totals: Counter = Counter()

    for appointment in appointments:
        preferred_date = appointment.preferred_date
        if preferred_date is None or not range_start <= preferred_date <= range_end:
            continue

        if month_start <= preferred_date <= month_end:
            totals[appointment.status] += 1

        if report_type == 'daily':
            key = preferred_date
        elif report_type == 'weekly':
            key = range_start + timedelta(days=(preferred_date - range_start).days // 7 * 7)
        elif report_type == 'yearly':
            key = preferred_date.year
        else:
            key = hour_of(appointment.preferred_time)
            if key is None:
                continue

        buckets.setdefault(key, Counter())[appointment.status] += 1

    labels: list[str] = []
    ordered_counts: list[Counter] = []

    if report_type == 'weekly':
        for number, (week_start, week_end) in enumerate(_weekly_buckets(range_start, range_end), start=1):
            labels.append(f'Week {number} ({week_start:%b} {week_start.day}-{week_end.day})')
            ordered_counts.append(buckets.get(week_start, Counter()))
    else:
        for key in sorted(buckets):
            if report_type == 'daily':
                labels.append(str(key.day))
            elif report_type == 'yearly':
                labels.append(str(key))
            else:
                labels.append(f'{key:02d}:00')
            ordered_counts.append(buckets[key])

    def series(status: AppointmentStatus) -> list[int]:
        return [counts[status.value] for counts in ordered_counts]

    return HistoryReport(
        labels=labels,
        completed=series(AppointmentStatus.COMPLETED),
        approved=series(AppointmentStatus.APPROVED),
        rejected=series(AppointmentStatus.REJECTED),
        pending=series(AppointmentStatus.PENDING),
        cancelled=series(AppointmentStatus.CANCELLED),
        total_completed=totals[AppointmentStatus.COMPLETED.value],
        total_approved=totals[AppointmentStatus.APPROVED.value],
        total_rejected=totals[AppointmentStatus.REJECTED.value],
        total_pending=totals[AppointmentStatus.PENDING.value],
        total_cancelled=totals[AppointmentStatus.CANCELLED.value],
    )
