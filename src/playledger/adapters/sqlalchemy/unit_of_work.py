"""SQLAlchemy-backed unit of work for the play ledger."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import create_engine, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from playledger.adapters.sqlalchemy.mappings import start_mappers
from playledger.adapters.sqlalchemy.migrations import upgrade_head
from playledger.adapters.sqlalchemy.repositories import (
    SqlAlchemyDedupClaimRepository,
    SqlAlchemyPlayCounterRepository,
    SqlAlchemyPlayEventRepository,
    SqlAlchemyTrackRepository,
    SqlAlchemyUserRepository,
)
from playledger.config.storage import get_database_uri
from playledger.domain.errors import ConflictError, StoreUnavailableError
from playledger.domain.ports.unit_of_work import LedgerRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None
    _serial_lock: threading.RLock | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value
        # every session on a StaticPool engine shares one connection and its transaction
        shared = value is not None and isinstance(value.pool, StaticPool)
        self._serial_lock = threading.RLock() if shared else None

    @property
    def serial_lock(self) -> threading.RLock | None:
        return self._serial_lock

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call playledger.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def build_engine(database_uri: str) -> Engine:
    """Create an engine for ``database_uri``.

    A private in-memory SQLite database lives on a single connection, so it gets a
    ``StaticPool``; units of work on such an engine run one at a time.
    """

    if not database_uri.startswith("sqlite"):
        return create_engine(database_uri, future=True)
    url = make_url(database_uri)
    connect_args: dict[str, Any] = {"check_same_thread": False, "timeout": 30}
    if url.database in (None, "", ":memory:") or url.query.get("mode") == "memory":
        # a private in-memory database only exists on the connection that created it
        return create_engine(
            database_uri,
            future=True,
            connect_args=connect_args,
            poolclass=StaticPool,
        )
    return create_engine(database_uri, future=True, connect_args=connect_args)


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, migrate the schema and reset the session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or build_engine(get_database_uri(database_uri))
    start_mappers()
    upgrade_head(engine=resolved_engine)
    log.info("SQLAlchemy adapter ready on %s", resolved_engine.url.render_as_string())

    _STATE.engine = resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class SqlAlchemyUnitOfWork:
    """Session-per-unit boundary; the store's exceptions never leak past it.

    Integrity violations surface as :class:`ConflictError`; any other SQLAlchemy failure
    becomes :class:`StoreUnavailableError`.
    """

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._serial_lock = _STATE.serial_lock
        self._session: Session | None = None
        self._repositories: LedgerRepositories | None = None

    def _build_repositories(self, session: Session) -> LedgerRepositories:
        return LedgerRepositories(
            play_events=SqlAlchemyPlayEventRepository(session),
            tracks=SqlAlchemyTrackRepository(session),
            users=SqlAlchemyUserRepository(session),
            counters=SqlAlchemyPlayCounterRepository(session),
            claims=SqlAlchemyDedupClaimRepository(session),
        )

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        if self._serial_lock is not None:
            self._serial_lock.acquire()
        try:
            self.session = self.session_factory()
        except BaseException:
            self._release()
            raise
        self._repositories = self._build_repositories(self.session)
        return self

    def _release(self) -> None:
        if self._serial_lock is not None:
            self._serial_lock.release()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        try:
            if exc_type is not None:
                self.rollback()
        finally:
            try:
                self.session.close()
            finally:
                self.session = None
                self._repositories = None
                self._release()
        if isinstance(exc_value, IntegrityError):
            raise ConflictError(str(exc_value.orig)) from exc_value
        if isinstance(exc_value, SQLAlchemyError):
            log.error("Store failure: %s", exc_value)
            raise StoreUnavailableError(str(exc_value)) from exc_value
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> LedgerRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


if TYPE_CHECKING:
    from playledger.domain.ports.unit_of_work import LedgerUnitOfWork

    _uow_check: LedgerUnitOfWork = SqlAlchemyUnitOfWork()
