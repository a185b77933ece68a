"""Environment variable loaders for configuration."""

from __future__ import annotations

import os

from .errors import ConfigurationError


def optional_env_str(name: str) -> str | None:
    """Return the stripped value of ``name``; unset and blank both mean ``None``."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def optional_env_int(name: str, default: int, *, minimum: int = 1) -> int:
    """Read an integer override, falling back to ``default`` when unset or blank."""

    raw = optional_env_str(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(
            f"{name} must be an integer, got {raw!r}", variable=name
        ) from exc
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}", variable=name)
    return value
