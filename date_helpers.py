"""
Date normalization shared by the write side and the reporting queries.

Expenses are stored with day granularity, so both ``created_at`` on write and the
``day``/``date`` query parameters go through :func:`normalize_date`. Using the same
function on both sides keeps boundary days inside the month window.
"""
import calendar
import re
from datetime import date, datetime
from typing import Optional, Tuple, Union

from errors import InvalidArgument

DateLike = Union[str, date, datetime]

_MONTH_ONLY = re.compile(r"^\d{4}-\d{2}$")


def normalize_date(value: Optional[DateLike], default: Optional[date] = None) -> date:
    """
    Reduce a date, datetime or ISO-8601 string to a calendar day

    Args:
        value: date/datetime instance or ISO string (YYYY-MM-DD or a full timestamp)
        default: returned when value is empty; None makes an empty value an error

    Returns:
        The calendar day

    Raises:
        InvalidArgument: value is empty without a default, or cannot be parsed
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if default is None:
            raise InvalidArgument("Date is required")
        return default

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidArgument(f"Invalid date: {value!r}")

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise InvalidArgument(f"Invalid date: {value}") from None


def month_range(value: Optional[DateLike], default: Optional[date] = None) -> Tuple[date, date]:
    """
    First and last day (inclusive) of the calendar month containing ``value``

    ``value`` may also be a bare ``YYYY-MM`` month designator.
    """
    if isinstance(value, str) and _MONTH_ONLY.match(value.strip()):
        value = value.strip() + "-01"
    day = normalize_date(value, default=default)
    last_day = calendar.monthrange(day.year, day.month)[1]
    return date(day.year, day.month, 1), date(day.year, day.month, last_day)
