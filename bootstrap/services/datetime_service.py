"""Datetime parsing for sync markers: lax input -> epoch seconds."""

from __future__ import annotations

from datetime import datetime

import pendulum

EPOCH_ZERO = 0


def parse_datetime(value: str, default_tz: str = "UTC") -> datetime:
    """Parse a lax datetime string into a timezone-aware datetime.

    Accepts the shapes a sync producer is known to write:
    - 2024-01-01T00:00:00Z
    - 2024-01-01T00:00:00+00:00
    - 2024-01-01 00:00:00
    - 2024-01-01
    - RFC 2822 style output of ``date`` (Mon Jan  1 00:00:00 UTC 2024)

    Missing timezone defaults to default_tz. Raises ValueError when the value
    is not a point in time.
    """
    value_str = value.strip()
    if not value_str:
        raise ValueError("Empty datetime string")

    parsed = pendulum.parse(value_str, tz=default_tz, strict=False)
    if isinstance(parsed, pendulum.DateTime):
        return parsed
    if isinstance(parsed, pendulum.Date):
        # pendulum.parse returns Date for date-only strings
        return pendulum.datetime(parsed.year, parsed.month, parsed.day, tz=default_tz)
    # Durations, intervals and bare times carry no absolute instant.
    raise ValueError(f"Not a point in time: {value_str!r}")


def to_epoch(value: str | None) -> int:
    """Convert a marker value to whole epoch seconds.

    Absent or unparseable values compare as the smallest possible instant.
    """
    if value is None:
        return EPOCH_ZERO
    try:
        return int(parse_datetime(value).timestamp())
    except (ValueError, TypeError, OverflowError):
        return EPOCH_ZERO
