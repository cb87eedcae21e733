"""
DateTime utilities for the Umrah registration form.
All calendar decisions ("today", age, passport validity) use the Asia/Jakarta timezone.
"""
import calendar
import re
from datetime import datetime, date
from typing import Any, Optional

import pytz


# Timezone configuration
TIMEZONE = pytz.timezone('Asia/Jakarta')

DISPLAY_DATE_FORMAT = '%d/%m/%Y'

# DD/MM/YYYY or DD-MM-YYYY as typed by applicants
LOCAL_DATE_PATTERN = re.compile(r'^([0-9]{1,2})[/-]([0-9]{1,2})[/-]([0-9]{4})$')


def get_current_datetime() -> datetime:
    """Get current datetime in Asia/Jakarta timezone."""
    return datetime.now(TIMEZONE)


def get_today() -> date:
    """Get today's calendar date in Asia/Jakarta timezone."""
    return get_current_datetime().date()


def parse_date_value(value: Any) -> Optional[date]:
    """
    Parse a date coming from a form payload.

    Supports:
    - date and datetime objects (aware datetimes are converted to Asia/Jakarta first)
    - ISO strings: "2024-01-15", "2024-01-15T00:00:00", "2024-01-15T17:00:00.000Z"
    - Local strings: "15/01/2024", "15-01-2024"

    Args:
        value: Raw value

    Returns:
        date object or None if parsing fails
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(TIMEZONE)
        return value.date()

    if isinstance(value, date):
        return value

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    match = LOCAL_DATE_PATTERN.match(text)
    if match:
        try:
            return date(int(match.group(3)), int(match.group(2)), int(match.group(1)))
        except ValueError:
            return None

    # JavaScript toISOString() uses a trailing Z
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(TIMEZONE)
    return parsed.date()


def add_months(base: date, months: int) -> date:
    """
    Add calendar months to a date.

    The day is clamped to the last day of the target month,
    so 31 August + 6 months is the last day of February.
    """
    month_index = base.month - 1 + months
    year = base.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(base.day, last_day))


def calculate_age(birth_date: date, on_date: Optional[date] = None) -> int:
    """
    Calculate age in full years, accounting for month/day rollover.

    Args:
        birth_date: Date of birth
        on_date: Reference date (defaults to today)

    Returns:
        Age in completed years
    """
    on_date = on_date or get_today()
    age = on_date.year - birth_date.year
    if (on_date.month, on_date.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def format_date_id(value: Any, default: str = '-') -> str:
    """
    Format a date for Indonesian documents (dd/mm/yyyy).

    Args:
        value: date, datetime or parsable string
        default: Returned when the value is empty

    Returns:
        Formatted string; unparsable strings are returned unchanged
    """
    if value is None or value == '':
        return default

    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone(TIMEZONE)

    parsed = parse_date_value(value)
    if parsed is None:
        return str(value)
    return parsed.strftime(DISPLAY_DATE_FORMAT)
