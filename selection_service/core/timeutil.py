# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Timestamp normalization used at the repository boundary."""
from datetime import date, datetime, time, timezone
from typing import Optional, Union


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC; aware ones are converted to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def parse_day(value: Union[str, date, datetime]) -> date:
    """Accept an ISO date, an ISO datetime, or a date/datetime object."""
    if isinstance(value, datetime):
        return ensure_utc(value).date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if len(text) == 10:
        return date.fromisoformat(text)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text)).date()


def to_db_timestamp(value: Optional[datetime]) -> Optional[str]:
    """Fixed-width UTC ISO-8601 text, so string order equals time order."""
    if value is None:
        return None
    return ensure_utc(value).isoformat(timespec="microseconds")


def from_db_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))
