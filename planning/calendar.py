"""
Calendar helpers for the scheduling core.

All scheduling arithmetic happens on whole calendar days. End dates are
inclusive, so a one-day task starts and finishes on the same date. The
only calendar knowledge beyond that is the weekday/weekend split used to
count working days.
"""
from datetime import date, datetime, timedelta
import logging

from config import DATE_FORMAT, WEEKEND_DAYS as WEEKEND_DAYS_SETTING

logger = logging.getLogger(__name__)

_ISO_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
)


def parse_date(value, date_format=None):
    """
    Converts a date-like value to a ``date``.

    Accepts ``date``/``datetime`` objects and strings in the configured
    format or in ISO 8601. Returns None when the value is missing or
    cannot be parsed; callers decide how to report that.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    # Строки вида 2025-01-06T00:00:00.000Z приводим к формату с часовым поясом
    if text.endswith('Z'):
        text = text[:-1] + '+0000'

    for fmt in (date_format or DATE_FORMAT,) + _ISO_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    logger.debug(f"Unparseable date value: {value!r}")
    return None


def format_date(value, date_format=None):
    """Formats a date for output; None stays None."""
    if value is None:
        return None
    return value.strftime(date_format or DATE_FORMAT)


def add_days(start, days):
    return start + timedelta(days=days)


def days_between(first, second):
    """Signed number of days from ``first`` to ``second``."""
    return (second - first).days


def inclusive_length(start, end):
    """Number of calendar days covered by an inclusive [start, end] range."""
    return days_between(start, end) + 1


def finish_from_start(start, duration):
    """Inclusive finish date of a task lasting ``duration`` days."""
    return add_days(start, duration - 1)


def start_from_finish(finish, duration):
    return add_days(finish, -(duration - 1))


def ranges_overlap(start_a, end_a, start_b, end_b):
    """True when two inclusive date ranges share at least one day."""
    return start_a <= end_b and start_b <= end_a


def is_weekend(day, weekend_days=None):
    if weekend_days is None:
        weekend_days = DEFAULT_WEEKEND_DAYS
    return day.weekday() in weekend_days


def count_work_days(start, end, weekend_days=None):
    """
    Counts working days in the inclusive range [start, end].

    Args:
        start: First day of the range
        end: Last day of the range
        weekend_days: Weekday numbers treated as days off (Monday=0)

    Returns:
        Number of days that are not weekend days, 0 for a reversed range
    """
    if start is None or end is None or end < start:
        return 0
    if weekend_days is None:
        weekend_days = DEFAULT_WEEKEND_DAYS

    total_days = inclusive_length(start, end)
    full_weeks, remainder = divmod(total_days, 7)
    work_days = full_weeks * (7 - len(set(weekend_days)))

    current_date = add_days(start, full_weeks * 7)
    for _ in range(remainder):
        if current_date.weekday() not in weekend_days:
            work_days += 1
        current_date += timedelta(days=1)

    return work_days


def get_weekday_number(day_name):
    """
    Converts a weekday name to its number (0-6, Monday is 0).

    Returns -1 for an unknown name.
    """
    days = {
        'monday': 0,
        'tuesday': 1,
        'wednesday': 2,
        'thursday': 3,
        'friday': 4,
        'saturday': 5,
        'sunday': 6
    }

    return days.get(day_name.strip().lower(), -1)


def parse_weekend_days(value):
    """
    Parses a weekend definition such as "5,6" or "saturday,sunday".

    Raises:
        ValueError: a part is neither a weekday number nor a weekday name
    """
    days = []
    for part in str(value).split(','):
        part = part.strip()
        if not part:
            continue
        number = int(part) if part.isdigit() else get_weekday_number(part)
        if not 0 <= number <= 6:
            raise ValueError(f"Unknown weekday: {part}")
        days.append(number)
    return sorted(set(days))


def _configured_weekend_days():
    try:
        return parse_weekend_days(WEEKEND_DAYS_SETTING)
    except ValueError as e:
        logger.warning(f"Invalid WEEKEND_DAYS setting {WEEKEND_DAYS_SETTING!r} ({e}), using Saturday and Sunday")
        return [5, 6]


DEFAULT_WEEKEND_DAYS = _configured_weekend_days()
