"""
Clock-window arithmetic on "HH:MM" strings.
"""

from datetime import time

DAY_NAMES = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


def parse_clock(value: str) -> time:
    """Parse "HH:MM" (or "H:MM", "HH:MM:SS") into a time. Raises ValueError."""
    parts = str(value).strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid clock time: {value!r}")
    hour, minute = int(parts[0]), int(parts[1])
    second = int(parts[2]) if len(parts) == 3 else 0
    return time(hour, minute, second)


def is_time_between(current: str, start: str, end: str) -> bool:
    """Inclusive start <= current <= end. No midnight wrap."""
    cur = parse_clock(current)
    return parse_clock(start) <= cur <= parse_clock(end)


def is_in_window(current: str, start: str, end: str) -> bool:
    """
    Inclusive window check that wraps midnight when start > end.

    22:00-07:00 contains 23:30 and 06:00 but not 12:00.
    """
    cur = parse_clock(current)
    st = parse_clock(start)
    en = parse_clock(end)
    if st > en:
        return cur >= st or cur <= en
    return st <= cur <= en
