"""Date parsing and formatting utilities for résumé entries."""

import re
from datetime import date, datetime
from typing import Optional, Union

# Values meaning "still ongoing" in an end-date field
ONGOING_MARKERS = {"present", "current", "now", "ongoing", "today", "présent", "actuel"}

DAYS_PER_YEAR = 365.25

_PARTIAL_DATE = re.compile(r"^(?P<year>\d{4})(?:[-/](?P<month>\d{1,2}))?(?:[-/](?P<day>\d{1,2}))?$")


def is_ongoing(value: Optional[Union[str, date]]) -> bool:
    """True if an end date is missing or marks an ongoing position."""
    if value is None:
        return True
    if isinstance(value, date):
        return False
    text = str(value).strip().lower()
    return not text or text in ONGOING_MARKERS


def parse_partial_date(value: Optional[Union[str, date]]) -> Optional[date]:
    """
    Parse a résumé-style date into a ``date``.

    Accepts ``YYYY``, ``YYYY-MM`` and ``YYYY-MM-DD`` (``/`` also allowed as separator).
    Missing month/day default to the first of the period.

    Args:
        value: Date string, ``date`` instance, or None

    Returns:
        Parsed date, or None for ongoing markers and unparseable values

    Examples:
        >>> parse_partial_date("2019-03")
        datetime.date(2019, 3, 1)
        >>> parse_partial_date("present") is None
        True
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if is_ongoing(value):
        return None

    match = _PARTIAL_DATE.match(str(value).strip())
    if not match:
        return None

    year = int(match.group("year"))
    month = int(match.group("month") or 1)
    day = int(match.group("day") or 1)
    try:
        return date(year, month, day)
    except ValueError:
        return None


def years_since(end: Optional[Union[str, date]], as_of: date) -> float:
    """
    Years elapsed between an end date and ``as_of``.

    Ongoing or unparseable end dates count as zero years ago. Future dates
    also return zero.
    """
    end_date = parse_partial_date(end)
    if end_date is None:
        return 0.0
    return max(0.0, (as_of - end_date).days / DAYS_PER_YEAR)


def format_date_range(start: Optional[str], end: Optional[str]) -> str:
    """
    Format an experience's date range for display.

    Examples:
        >>> format_date_range("2019-03", None)
        '2019-03 - Present'
    """
    end_display = "Present" if is_ongoing(end) else str(end)
    if not start:
        return end_display
    return f"{start} - {end_display}"


def today() -> date:
    """Current local date (the default ``as_of`` for fitting runs)."""
    return date.today()


def now() -> str:
    """Compact local timestamp for session directory names (e.g. ``20251114_123456``)."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")
