"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """An environment override could not be turned into a usable setting."""

    def __init__(self, message: str, *, variable: str | None = None) -> None:
        super().__init__(message)
        self.variable = variable
