"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from playledger import __version__
from playledger.api.routes import stats_router, tracks_router
from playledger.api.schemas import HealthResponse
from playledger.app import build_services
from playledger.domain.errors import NotFoundError, StoreUnavailableError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from playledger.app import LedgerServices

log = logging.getLogger(__name__)


async def _not_found(request: Request, exc: Exception) -> JSONResponse:
    _ = request
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def _store_unavailable(request: Request, exc: Exception) -> JSONResponse:
    log.error("Store unavailable while serving %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Play store unavailable"},
    )


def create_app(services: LedgerServices | None = None) -> FastAPI:
    """Build the HTTP app; without ``services`` the store is wired on startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if getattr(app.state, "services", None) is None:
            app.state.services = build_services()
        log.info("Play ledger API ready")
        yield
        log.info("Play ledger API stopped")

    app = FastAPI(title="Play Ledger API", version=__version__, lifespan=lifespan)
    app.state.services = services
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(StoreUnavailableError, _store_unavailable)
    app.include_router(tracks_router)
    app.include_router(stats_router)

    @app.get("/health", response_model=HealthResponse)
    def health_check() -> HealthResponse:
        return HealthResponse()

    return app
