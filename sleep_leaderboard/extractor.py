#!/usr/bin/env python3
"""
Sleep log table extraction.

Issue bodies carry a markdown table, usually wrapped in marker comments:

    <!-- SLEEP_LOG_TABLE_START -->
    | Date | Sleep (UTC+8) | Wake (UTC+8) | Duration | Source |
    |---|---|---|---|---|
    | 2024-03-01 | 2024-03-01 23:40 | 2024-03-02 07:10 | 7h30m | manual |
    <!-- SLEEP_LOG_TABLE_END -->

The parser here is pure: text in, DailyRecord or None out.
"""

import re
from enum import Enum
from typing import List, Optional

from .models import DailyRecord

TABLE_START_MARKER = "<!-- SLEEP_LOG_TABLE_START -->"
TABLE_END_MARKER = "<!-- SLEEP_LOG_TABLE_END -->"

HEADER_PREFIX = "| Date |"
SLEEP_COLUMN = "Sleep (UTC+8)"
WAKE_COLUMN = "Wake (UTC+8)"
CELL_DELIMITER = "|"
MIN_CELLS = 5

# ASCII digits only; str patterns would otherwise accept fullwidth digits.
DURATION_PATTERN = re.compile(r"^([0-9]+)h([0-9]+)m$")


class LineKind(Enum):
    HEADER = "header"
    ROW = "row"
    OTHER = "other"


def classify_line(line: str) -> LineKind:
    """Classify a stripped line of the table region."""
    if line.startswith(HEADER_PREFIX) and SLEEP_COLUMN in line and WAKE_COLUMN in line:
        return LineKind.HEADER
    if line.startswith(CELL_DELIMITER):
        return LineKind.ROW
    return LineKind.OTHER


def table_region(body: str) -> str:
    """Text between the table markers, or the whole body if they are missing or reversed."""
    start = body.find(TABLE_START_MARKER)
    end = body.find(TABLE_END_MARKER)
    if start != -1 and end != -1 and end > start:
        return body[start + len(TABLE_START_MARKER):end]
    return body


def split_lines(region: str) -> List[str]:
    stripped = (line.strip() for line in region.split("\n"))
    return [line for line in stripped if line]


def split_cells(line: str) -> List[str]:
    # The pieces before the first and after the last delimiter are not cells.
    return [cell.strip() for cell in line.split(CELL_DELIMITER)[1:-1]]


def parse_duration_minutes(duration: str) -> Optional[int]:
    """
    Convert a duration like '7h30m' to minutes.

    Returns None when the text does not match the canonical pattern or the
    total is not positive.
    """
    match = DURATION_PATTERN.match(duration)
    if not match:
        return None
    minutes = int(match.group(1)) * 60 + int(match.group(2))
    if minutes <= 0:
        return None
    return minutes


def extract_daily_record(body: Optional[str], target_date: str) -> Optional[DailyRecord]:
    """
    Extract the record for target_date from an issue body.

    Only the first row dated target_date is considered. If that row is
    incomplete or its duration is invalid the result is None, even when a
    later row carries the same date.

    Args:
        body: Raw issue body, possibly empty or None.
        target_date: Date string in YYYY-MM-DD form.

    Returns:
        The DailyRecord, or None when no complete record exists.
    """
    if not body:
        return None

    lines = split_lines(table_region(body))
    kinds = [classify_line(line) for line in lines]
    if LineKind.HEADER not in kinds:
        return None

    # The line after the header is the separator row.
    first_row = kinds.index(LineKind.HEADER) + 2

    for line, kind in zip(lines[first_row:], kinds[first_row:]):
        if kind is LineKind.OTHER:
            continue

        cells = split_cells(line)
        if len(cells) < MIN_CELLS:
            continue

        date, sleep_at, wake_at, duration, source = cells[:MIN_CELLS]
        if date != target_date:
            continue

        if not sleep_at or not wake_at or not duration:
            return None

        minutes = parse_duration_minutes(duration)
        if minutes is None:
            return None

        return DailyRecord(
            date=date,
            sleep_at=sleep_at,
            wake_at=wake_at,
            duration=duration,
            duration_minutes=minutes,
            source=source,
        )

    return None
