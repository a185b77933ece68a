from __future__ import annotations

from .stats import router as stats_router
from .tracks import router as tracks_router

__all__ = ["stats_router", "tracks_router"]
