"""Date parsing utilities."""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from dateutil import parser as date_parser

# "01/03/2024" is day first; "2024/03/01" starts with the year
DAY_FIRST_PATTERN = re.compile(r"\d{1,2}/")


def _parse_calendar_date(text: str) -> date:
    return date_parser.parse(text, dayfirst=bool(DAY_FIRST_PATTERN.match(text))).date()


def parse_date(date_str: str) -> date:
    """Parse a date typed by an operator.

    Accepts "today", "yesterday", "tomorrow" and absolute dates
    ("2024-01-15", "15/01/2024", "January 15, 2024").

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
        return _parse_calendar_date(date_str)
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_record_date(value: Any) -> date:
    """Parse the ``date`` field of a stored transaction or movement.

    Stored dates are ISO strings ("2024-03-01", "2024-03-01T10:00:00Z"),
    day-first strings ("01/03/2024"), year-first slash strings
    ("2024/03/01") or date/datetime objects.

    Raises:
        ValueError: If the value is missing or cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Could not parse record date {value!r}")

    text = value.strip()
    try:
        return _parse_calendar_date(text)
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse record date '{text}': {e}")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a creation timestamp into a naive UTC datetime.

    Returns None for missing or unparseable values, since timestamps are
    only used as ordering tie-breakers.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        # Epoch milliseconds
        dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    elif isinstance(value, str):
        try:
            dt = date_parser.isoparse(value)
        except (ValueError, OverflowError):
            return None
    else:
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt
