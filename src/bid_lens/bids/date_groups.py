"""Date-group classification for bid due dates.

Buckets are checked in priority order and the first match wins:
overdue, today, tomorrow, this week, next week, later. Weeks start on
Monday. All comparisons happen in local naive time.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

import structlog

from bid_lens.schemas.base import to_local_naive
from bid_lens.schemas.bids import DateGroup

logger = structlog.get_logger(__name__)

DateInput = datetime | date | str | None


def parse_due_date(value: str | None) -> datetime | None:
    """Parse a due date string.

    ``YYYY-MM-DD`` values resolve to local midnight. Other ISO 8601 strings
    are accepted too. Anything unparseable yields None.

    Args:
        value: Date string from extraction.

    Returns:
        Naive local datetime, or None.
    """
    if not value or not value.strip():
        return None

    text = value.strip()
    try:
        return datetime.strptime(text, "%Y-%m-%d")
    except ValueError:
        pass

    try:
        return to_local_naive(datetime.fromisoformat(text))
    except ValueError:
        logger.debug("unparseable_due_date", value=value)
        return None


def coerce_date(value: DateInput) -> datetime | None:
    """Coerce any supported date input to a naive local datetime."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_local_naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    return parse_due_date(value)


def start_of_day(value: datetime) -> datetime:
    """Midnight at the start of ``value``'s day."""
    return datetime.combine(value.date(), time.min)


def end_of_day(value: datetime) -> datetime:
    """Last representable instant of ``value``'s day."""
    return datetime.combine(value.date(), time.max)


def end_of_week(value: datetime) -> datetime:
    """End of the Monday-based week containing ``value``."""
    return end_of_day(value + timedelta(days=6 - value.weekday()))


def get_date_group(value: DateInput, now: datetime | None = None) -> DateGroup:
    """Classify a due date relative to now.

    Args:
        value: Due date as datetime, date or string. None or unparseable
            values classify as ``no_date``.
        now: Reference instant (default: current local time).

    Returns:
        The matching DateGroup.
    """
    due = coerce_date(value)
    if due is None:
        return DateGroup.NO_DATE

    current = to_local_naive(now) if now is not None else datetime.now()
    today = start_of_day(current)
    tomorrow = today + timedelta(days=1)
    day_after_tomorrow = today + timedelta(days=2)
    end_of_this_week = end_of_week(current)
    start_of_next_week = start_of_day(end_of_this_week + timedelta(days=1))
    end_of_next_week = end_of_week(start_of_next_week)

    if due < today:
        return DateGroup.OVERDUE

    if due.date() == today.date():
        return DateGroup.TODAY

    if due.date() == tomorrow.date():
        return DateGroup.TOMORROW

    if day_after_tomorrow <= due <= end_of_this_week:
        return DateGroup.THIS_WEEK

    if start_of_next_week <= due <= end_of_next_week:
        return DateGroup.NEXT_WEEK

    return DateGroup.LATER
