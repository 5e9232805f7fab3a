"""Parsing of user-supplied durations, timestamps and time ranges.

All values are milliseconds since the Unix epoch, interpreted as UTC.
"""

import re
from datetime import datetime, timezone
from typing import Optional, Tuple

from cwlogs.core.constants import DEFAULT_QUERY_WINDOW_MS
from cwlogs.core.errors import MalformedDurationError, MalformedTimestampError

_DURATION_RE = re.compile(r"^(\d+)([smhd])$")

_UNIT_MS = {
    "s": 1000,
    "m": 60 * 1000,
    "h": 60 * 60 * 1000,
    "d": 24 * 60 * 60 * 1000,
}

# Tried in order; all are naive and read as UTC
TIMESTAMP_FORMATS = [
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S.%fZ",
]

# Integers above this are already milliseconds
_MILLIS_THRESHOLD = 1_000_000_000_000


def now_ms() -> int:
    """Current UTC time in milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def parse_duration(value: str) -> int:
    """Parse a relative duration like ``30m`` into milliseconds.

    Supported units are ``s``, ``m``, ``h`` and ``d``.

    Raises:
        MalformedDurationError: If the value does not match ``<int><unit>``
    """
    match = _DURATION_RE.match(value.strip()) if value else None
    if match is None:
        raise MalformedDurationError(
            f"Invalid duration format: {value}. Use formats like '1h', '30m', '2d'",
            details={"value": value},
        )
    amount, unit = match.groups()
    return int(amount) * _UNIT_MS[unit]


def parse_timestamp(value: str) -> int:
    """Parse an absolute timestamp into milliseconds.

    Accepts Unix epoch seconds or milliseconds, or one of
    ``TIMESTAMP_FORMATS``.

    Raises:
        MalformedTimestampError: If no format matches
    """
    text = value.strip() if value else ""
    if re.fullmatch(r"-?\d+", text):
        number = int(text)
        return number if number > _MILLIS_THRESHOLD else number * 1000

    for fmt in TIMESTAMP_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return int(parsed.replace(tzinfo=timezone.utc).timestamp() * 1000)

    raise MalformedTimestampError(
        f"Could not parse timestamp: {value}",
        details={"value": value, "accepted": "epoch seconds/millis or ISO 8601"},
    )


def parse_time_range(
    since: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    now: Optional[int] = None,
) -> Tuple[Optional[int], Optional[int]]:
    """Resolve command-line time options into a ``(start, end)`` window.

    ``since`` takes precedence over ``start``/``end``. When nothing is
    given the window is the last hour.
    """
    current = now if now is not None else now_ms()
    start_time: Optional[int] = None
    end_time: Optional[int] = None

    if since:
        start_time = current - parse_duration(since)
        end_time = current
    else:
        if start:
            start_time = parse_timestamp(start)
        if end:
            end_time = parse_timestamp(end)

    if start_time is None and end_time is None:
        start_time = current - DEFAULT_QUERY_WINDOW_MS
        end_time = current

    return start_time, end_time
