"""HTTP adapter for the play ledger."""

from __future__ import annotations

from .main import create_app

__all__ = ["create_app"]
