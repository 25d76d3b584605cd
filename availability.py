from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Iterator, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
WEEKEND_DAYS = {"Saturday", "Sunday"}
DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y")


def day_of_week(day: date) -> str:
    return WEEKDAY_NAMES[day.weekday()]


def format_month_day(day: date) -> str:
    return f"{day.month}/{day.day}"


def available_hours(day_name: str, weekday_hours: float, weekend_hours: float) -> float:
    return weekend_hours if day_name in WEEKEND_DAYS else weekday_hours


def parse_calendar_date(value: Any) -> date:
    """Coerce a date, datetime or date string (ISO, M/D, M/D/YYYY ...) to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        raise ValueError("empty date")
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    # Bare M/D: 2000 is a leap year so 2/29 still parses.
    try:
        return datetime.strptime(f"{text}/2000", "%m/%d/%Y").date()
    except ValueError:
        pass
    parsed = pd.to_datetime(text)
    if pd.isna(parsed):
        raise ValueError(f"unparseable date: {text}")
    return parsed.date()


def blackout_key(value: Any) -> Optional[str]:
    try:
        return format_month_day(parse_calendar_date(value))
    except (ValueError, TypeError, OverflowError) as exc:
        logger.warning("Ignoring blackout date %r: %s", value, exc)
        return None


def count_plan_days(today: date, test_date: date) -> int:
    return (test_date - today).days


def iter_plan_days(test_date: date, total_days: int) -> Iterator[Tuple[int, date]]:
    """Yield (days_left, day) from tomorrow (days_left == total_days) to the test date (days_left == 1)."""
    for days_left in range(total_days, 0, -1):
        yield days_left, test_date - timedelta(days=days_left - 1)
