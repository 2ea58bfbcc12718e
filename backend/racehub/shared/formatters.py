"""
Finish time parsing and formatting.

Finish times are stored as text ("2:15:32" or "45:10") and compared
as integer seconds.
"""

from .errors import InvalidRawResultError


def parse_finish_time(value: str | None) -> int:
    """
    Parse "H:MM:SS" or "MM:SS" into seconds.

    Args:
        value: Finish time string

    Returns:
        Total seconds

    Raises:
        InvalidRawResultError: empty or malformed value
    """
    if value is None or not str(value).strip():
        raise InvalidRawResultError("finish time is required")

    parts = str(value).strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isascii() and p.isdigit() for p in parts):
        raise InvalidRawResultError(f"invalid finish time: {value!r}")

    numbers = [int(p) for p in parts]
    if any(n >= 60 for n in numbers[1:]):
        raise InvalidRawResultError(f"invalid finish time: {value!r}")

    if len(numbers) == 2:
        minutes, seconds = numbers
        return minutes * 60 + seconds
    hours, minutes, seconds = numbers
    return hours * 3600 + minutes * 60 + seconds


def format_time(seconds: int) -> str:
    """
    Format seconds as a finish time string.

    553   → "9:13"
    3125  → "52:05"
    8132  → "2:15:32"
    """
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
