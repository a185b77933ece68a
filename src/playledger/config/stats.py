"""Windowing and ranking defaults for the play ledger."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .env import optional_env_int, optional_env_str
from .errors import ConfigurationError

DEFAULT_DEDUP_WINDOW_HOURS = 24
DEFAULT_MONTHLY_WINDOW_DAYS = 30
DEFAULT_TOP_TRACKS_LIMIT = 5
DEFAULT_TRENDING_LIMIT = 10
DEFAULT_RECENT_UPLOADS_LIMIT = 5
DEFAULT_DAILY_PLAYS_DAYS = 7

TIMEZONE_ENV = "PLAYLEDGER_TIMEZONE"


@dataclass(frozen=True, slots=True)
class StatsConfig:
    dedup_window: timedelta = timedelta(hours=DEFAULT_DEDUP_WINDOW_HOURS)
    monthly_window: timedelta = timedelta(days=DEFAULT_MONTHLY_WINDOW_DAYS)
    top_tracks_limit: int = DEFAULT_TOP_TRACKS_LIMIT
    trending_limit: int = DEFAULT_TRENDING_LIMIT
    recent_uploads_limit: int = DEFAULT_RECENT_UPLOADS_LIMIT
    daily_plays_days: int = DEFAULT_DAILY_PLAYS_DAYS
    # None means the server's local calendar
    timezone: tzinfo | None = None


def _timezone_from_env() -> tzinfo | None:
    name = optional_env_str(TIMEZONE_ENV)
    if name is None:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(
            f"Unknown timezone in {TIMEZONE_ENV}: {name!r}", variable=TIMEZONE_ENV
        ) from exc


def get_stats_config() -> StatsConfig:
    return StatsConfig(
        dedup_window=timedelta(
            hours=optional_env_int("PLAYLEDGER_DEDUP_WINDOW_HOURS", DEFAULT_DEDUP_WINDOW_HOURS)
        ),
        monthly_window=timedelta(
            days=optional_env_int("PLAYLEDGER_MONTHLY_WINDOW_DAYS", DEFAULT_MONTHLY_WINDOW_DAYS)
        ),
        top_tracks_limit=optional_env_int(
            "PLAYLEDGER_TOP_TRACKS_LIMIT", DEFAULT_TOP_TRACKS_LIMIT
        ),
        trending_limit=optional_env_int("PLAYLEDGER_TRENDING_LIMIT", DEFAULT_TRENDING_LIMIT),
        recent_uploads_limit=optional_env_int(
            "PLAYLEDGER_RECENT_UPLOADS_LIMIT", DEFAULT_RECENT_UPLOADS_LIMIT
        ),
        daily_plays_days=optional_env_int(
            "PLAYLEDGER_DAILY_PLAYS_DAYS", DEFAULT_DAILY_PLAYS_DAYS
        ),
        timezone=_timezone_from_env(),
    )
