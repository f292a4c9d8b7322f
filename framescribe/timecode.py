"""Parsing and formatting of clock-style timestamps."""

import math

from framescribe.models import TimeRange


def parse_timecode(text: str) -> float:
    """Parse "SS", "MM:SS" or "HH:MM:SS" into seconds.

    The seconds field may be fractional ("1:02.5"). Hours and minutes must be
    whole numbers.
    """
    value = text.strip()
    if not value:
        raise ValueError("empty time value")

    parts = value.split(":")
    if len(parts) > 3:
        raise ValueError(f"invalid time value: {text!r}")

    try:
        seconds = float(parts[-1])
        whole = [int(p) for p in parts[:-1]]
    except ValueError:
        raise ValueError(f"invalid time value: {text!r}") from None

    if not math.isfinite(seconds) or seconds < 0 or any(w < 0 for w in whole):
        raise ValueError(f"invalid time value: {text!r}")

    total = seconds
    for multiplier, w in zip((60, 3600), reversed(whole)):
        total += w * multiplier
    return total


def parse_time_range(start: str, end: str) -> TimeRange:
    """Parse a start/end pair; the end must come after the start."""
    time_range = TimeRange(start=parse_timecode(start), end=parse_timecode(end))
    if time_range.end <= time_range.start:
        raise ValueError(
            f"end time ({end}) must be after start time ({start})"
        )
    return time_range


def format_clock(total_seconds: float) -> str:
    """Render seconds as minutes:seconds.tenths, e.g. 65.4 -> "1:05.4"."""
    total = round(total_seconds, 1)
    mins = int(total // 60)
    secs = total - mins * 60
    return f"{mins}:{secs:04.1f}"


def format_seconds(value: float) -> str:
    """Render seconds without a trailing ".0" for whole values."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)
