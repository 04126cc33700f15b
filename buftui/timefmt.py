"""Timestamp display: absolute date-time or calendar-aware "time ago"."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

ABSOLUTE_FORMAT = "%Y-%m-%d %H:%M:%S"


class TimeView(Enum):
    ABSOLUTE = "absolute"
    RELATIVE = "relative"

    def toggled(self) -> TimeView:
        return TimeView.RELATIVE if self is TimeView.ABSOLUTE else TimeView.ABSOLUTE


def parse_time_view(value: object, default: TimeView = TimeView.ABSOLUTE) -> TimeView:
    """Return the ``TimeView`` named by ``value``, or ``default``."""
    if isinstance(value, TimeView):
        return value
    if isinstance(value, str):
        try:
            return TimeView(value.strip().lower())
        except ValueError:
            return default
    return default


def format_time_ago(now: datetime, timestamp: datetime) -> str:
    """Describe how long before ``now`` the ``timestamp`` was.

    Differences are taken on calendar fields, largest first, so a timestamp
    from December seen in January reads "last year".
    """
    if timestamp > now:
        return "in the future"
    if timestamp == now:
        return "now"

    years = now.year - timestamp.year
    if years:
        return "last year" if years == 1 else f"{years} years ago"
    months = now.month - timestamp.month
    if months:
        return "last month" if months == 1 else f"{months} months ago"
    days = now.day - timestamp.day
    if days:
        return "yesterday" if days == 1 else f"{days} days ago"

    elapsed = (now - timestamp).total_seconds()
    if elapsed < 60:
        return "a few seconds ago"
    if elapsed < 3600:
        return f"{int(elapsed // 60)} minutes ago"
    return f"{int(elapsed // 3600)} hours ago"


def format_timestamp(
    timestamp: datetime | None,
    view: TimeView,
    now: datetime | None = None,
) -> str:
    if timestamp is None:
        return ""
    timestamp = timestamp.astimezone(timezone.utc)
    if view is TimeView.ABSOLUTE:
        return timestamp.strftime(ABSOLUTE_FORMAT)
    current = now if now is not None else datetime.now(timezone.utc)
    return format_time_ago(current.astimezone(timezone.utc), timestamp)
