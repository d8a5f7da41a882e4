"""Date parsing utilities."""

from datetime import date, datetime, time, timedelta, UTC
from typing import Optional, Union

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = ("today", "this-week", "this-month", "this-year", "last-week", "last-month", "last-year")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "15 January 2024") and the
    relative words "today", "yesterday" and "tomorrow".

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str, dayfirst=False).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get inclusive start and end dates for a named period.

    Args:
        period: One of today, this-week, this-month, this-year, last-week,
            last-month, last-year

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()
    monday = today - timedelta(days=today.weekday())

    if period == "today":
        return (today, today)
    if period == "this-week":
        return (monday, today)
    if period == "this-month":
        return (today.replace(day=1), today)
    if period == "this-year":
        return (today.replace(month=1, day=1), today)
    if period == "last-week":
        start = monday - timedelta(days=7)
        return (start, start + timedelta(days=6))
    if period == "last-month":
        start = (today - relativedelta(months=1)).replace(day=1)
        return (start, today.replace(day=1) - timedelta(days=1))
    if period == "last-year":
        start = today.replace(month=1, day=1) - relativedelta(years=1)
        return (start, today.replace(month=1, day=1) - timedelta(days=1))

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")


def to_datetime(value: Union[date, datetime, None], end_of_day: bool = False) -> Optional[datetime]:
    """Normalize a date or datetime to a naive UTC datetime for storage and filtering.

    Args:
        value: Date, datetime or None
        end_of_day: For plain dates, use the last instant of the day instead of midnight
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC).replace(tzinfo=None)
        return value
    return datetime.combine(value, time.max if end_of_day else time.min)
