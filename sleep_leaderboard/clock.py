#!/usr/bin/env python3
"""
Report date resolution in Beijing wall-clock time.

All calculations use a fixed +8h shift from UTC. The system timezone and the
tz database are never consulted.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional

UTC_OFFSET = timedelta(hours=8)
OFFSET_LABEL = "UTC+8"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def beijing_wall_clock(now: Optional[datetime] = None) -> datetime:
    """
    Return the UTC+8 wall clock for the given instant as a naive datetime.

    Args:
        now: The current instant. Naive values are taken as UTC.
             Defaults to the real current time.
    """
    if now is None:
        now = utc_now()
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)
    return now + UTC_OFFSET


def resolve_report_date(now: Optional[datetime] = None, cutoff_hour: int = 4) -> date:
    """
    Return the date whose records should be reported.

    Before the cutoff hour the previous night's log is still being written,
    so the report covers two days back; from the cutoff on, one day back.
    """
    wall = beijing_wall_clock(now)
    offset_days = 2 if wall.hour < cutoff_hour else 1
    return wall.date() - timedelta(days=offset_days)


def format_report_date(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def generated_at(now: Optional[datetime] = None) -> str:
    """Timestamp string like '2024-03-02 05:00:00 (UTC+8)'."""
    wall = beijing_wall_clock(now)
    return f"{wall:%Y-%m-%d %H:%M:%S} ({OFFSET_LABEL})"


def cutoff_description(cutoff_hour: int) -> str:
    return f"{cutoff_hour:02d}:00 ({OFFSET_LABEL})"
