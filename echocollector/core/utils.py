"""
Utility functions for Financial Echo Collector.
"""

import string
from datetime import date, datetime, timezone
from typing import Optional, Tuple, Union

DateLike = Union[date, datetime]


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def whole_years_between(start: DateLike, end: DateLike) -> int:
    """
    Count complete calendar years from start to end.

    Examples:
        2020-03-15 -> 2023-03-14 = 2
        2020-03-15 -> 2023-03-15 = 3
        2023-03-15 -> 2020-03-15 = -3

    Args:
        start: Earlier date
        end: Later date

    Returns:
        Whole years elapsed (negative if end precedes start)
    """
    start_d = _as_date(start)
    end_d = _as_date(end)

    if end_d < start_d:
        return -whole_years_between(end_d, start_d)

    years = end_d.year - start_d.year
    if (end_d.month, end_d.day) < (start_d.month, start_d.day):
        years -= 1
    return years


def whole_days_between(start: DateLike, end: DateLike) -> int:
    """Count complete days from start to end."""
    if isinstance(start, datetime) and isinstance(end, datetime):
        return (end - start).days
    return (_as_date(end) - _as_date(start)).days


def normalize_color_hex(value: Optional[str]) -> Optional[str]:
    """
    Normalize a display color to bare upper-case hex digits.

    Accepts an optional leading '#'. Returns None for blank input.

    Raises:
        ValueError: if the value is not 3, 6 or 8 hex digits
    """
    if value is None:
        return None

    cleaned = value.strip().lstrip("#")
    if not cleaned:
        return None

    if len(cleaned) not in (3, 6, 8) or any(c not in string.hexdigits for c in cleaned):
        raise ValueError(f"Invalid color hex: {value!r} (expected 3, 6 or 8 hex digits)")

    return cleaned.upper()


def hex_to_rgba(value: str) -> Tuple[int, int, int, int]:
    """
    Convert a 3/6/8-digit hex color to an (r, g, b, a) tuple.

    Examples:
        "F0A" -> (255, 0, 170, 255)
        "0A4D5E" -> (10, 77, 94, 255)
        "800A4D5E" -> (10, 77, 94, 128)

    Unparseable input yields opaque black.
    """
    try:
        cleaned = normalize_color_hex(value)
    except ValueError:
        return (0, 0, 0, 255)

    if cleaned is None:
        return (0, 0, 0, 255)

    n = int(cleaned, 16)
    if len(cleaned) == 3:
        return ((n >> 8) * 17, (n >> 4 & 0xF) * 17, (n & 0xF) * 17, 255)
    if len(cleaned) == 6:
        return (n >> 16, n >> 8 & 0xFF, n & 0xFF, 255)
    return (n >> 16 & 0xFF, n >> 8 & 0xFF, n & 0xFF, n >> 24)


def format_years_ago(years: int) -> str:
    """
    Human-readable elapsed years.

    Examples:
        0 -> "this year"
        1 -> "1 year ago"
        7 -> "7 years ago"
    """
    if years <= 0:
        return "this year"
    if years == 1:
        return "1 year ago"
    return f"{years} years ago"


def truncate(text: Optional[str], width: int = 60) -> str:
    """Shorten text for one-line display."""
    if not text:
        return ""
    text = " ".join(text.split())
    if len(text) <= width:
        return text
    return text[: width - 1].rstrip() + "…"
