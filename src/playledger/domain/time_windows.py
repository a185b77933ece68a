"""Clock abstraction and the rolling and calendar windows the ledger measures over."""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta, tzinfo
from typing import Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        raise ValueError("Window bounds must include timezone information")
    return value.astimezone(UTC)


def window_start(now: datetime, span: timedelta) -> datetime:
    """Earliest instant still inside a rolling window of ``span`` ending at ``now``."""

    if span <= timedelta(0):
        raise ValueError("Window span must be positive")
    return to_utc(now) - span


def trailing_window(now: datetime, span: timedelta) -> tuple[datetime, datetime]:
    """Return the closed interval ``[now - span, now]`` in UTC."""

    return window_start(now, span), to_utc(now)


def local_midnight(now: datetime, tz: tzinfo | None = None) -> datetime:
    """Start of the calendar day containing ``now``, returned in UTC.

    ``tz=None`` uses the server's local timezone, so the boundary moves with the host.
    """

    return day_start(to_utc(now).astimezone(tz).date(), tz)


def day_start(day: date, tz: tzinfo | None = None) -> datetime:
    """Local midnight opening ``day`` in ``tz`` (server local when ``None``), in UTC."""

    midnight = datetime.combine(day, time())
    if tz is None:
        return midnight.astimezone().astimezone(UTC)
    return midnight.replace(tzinfo=tz).astimezone(UTC)


def local_day(instant: datetime, tz: tzinfo | None = None) -> date:
    """Calendar date of ``instant`` in ``tz`` (server local when ``None``)."""

    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return instant.astimezone(tz).date()


__all__ = [
    "Clock",
    "day_start",
    "local_day",
    "local_midnight",
    "to_utc",
    "trailing_window",
    "utcnow",
    "window_start",
]
