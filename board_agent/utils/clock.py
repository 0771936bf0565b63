"""Timestamp helpers producing sortable ISO-8601 strings."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"
_TICK = timedelta(microseconds=1)


def system_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as UTC with microsecond precision and a ``Z`` suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    """Parse a timestamp written by this module or by a browser ``toISOString``."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def utc_now(clock: Optional[Clock] = None) -> str:
    return format_timestamp((clock or system_now)())


def next_after(previous: Optional[str], clock: Optional[Clock] = None) -> str:
    """Return the current time, bumped past ``previous`` if the clock has not moved.

    Args:
        previous: The timestamp being superseded, or ``None``.
        clock: Optional time source; defaults to the system clock.

    Returns:
        A timestamp strictly later than ``previous`` whenever ``previous``
        can be parsed.
    """

    current = (clock or system_now)()
    if not previous:
        return format_timestamp(current)
    try:
        prior = parse_timestamp(previous)
    except ValueError:
        return format_timestamp(current)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    if current <= prior:
        current = prior + _TICK
    return format_timestamp(current)


__all__ = [
    "Clock",
    "format_timestamp",
    "next_after",
    "parse_timestamp",
    "system_now",
    "utc_now",
]
