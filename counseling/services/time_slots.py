"""Parsing and matching of counselor time-slot strings.

A slot is free text entered by counselors and comes in four shapes:

* empty or missing: available the whole day
* a single time: ``"09:00"`` or ``"9:00 AM"``
* a range: ``"09:00-17:00"`` or ``"9:00 AM-5:00 PM"``
* a comma list: ``"09:00,10:00,14:00"``
"""

import re

TWELVE_HOUR_PATTERN = re.compile(r'(\d{1,2}):(\d{2})\s*(AM|PM)', re.IGNORECASE)
TWENTY_FOUR_HOUR_PATTERN = re.compile(r'(\d{1,2}):(\d{2})')
MINUTES_PER_HOUR = 60


def parse_time_to_minutes(text: str | None) -> int | None:
    """Return minutes since midnight for ``H:MM``/``HH:MM`` with an optional AM/PM suffix.

    ``None`` means the text could not be read as a clock time.
    """
    if not text:
        return None

    value = text.strip()

    match = TWELVE_HOUR_PATTERN.fullmatch(value)
    if match:
        hour = int(match.group(1))
        minute = int(match.group(2))
        meridiem = match.group(3).upper()
        if not 1 <= hour <= 12 or minute >= MINUTES_PER_HOUR:
            return None

        if meridiem == 'PM' and hour != 12:
            hour += 12
        elif meridiem == 'AM' and hour == 12:
            hour = 0

        return hour * MINUTES_PER_HOUR + minute

    match = TWENTY_FOUR_HOUR_PATTERN.fullmatch(value)
    if match:
        hour = int(match.group(1))
        minute = int(match.group(2))
        if hour > 23 or minute >= MINUTES_PER_HOUR:
            return None
        return hour * MINUTES_PER_HOUR + minute

    return None


def is_within_range(requested_time: str, slot: str) -> bool:
    start_text, end_text = slot.split('-')[:2]
    start_text = start_text.strip()
    end_text = end_text.strip()

    requested_minutes = parse_time_to_minutes(requested_time)
    start_minutes = parse_time_to_minutes(start_text)
    end_minutes = parse_time_to_minutes(end_text)

    if requested_minutes is not None and start_minutes is not None and end_minutes is not None:
        return start_minutes <= requested_minutes <= end_minutes

    # Unparseable bounds fall back to plain string ordering. This is unreliable
    # for 12-hour text ("10:00 AM" sorts before "9:00 AM") and is kept as-is.
    return start_text <= requested_time <= end_text


def is_within_slot(requested_time: str, slot: str | None) -> bool:
    if not slot:
        return True

    if '-' in slot:
        return is_within_range(requested_time, slot)

    if slot == requested_time:
        return True

    if ',' in slot:
        return requested_time in [token.strip() for token in slot.split(',')]

    return False
