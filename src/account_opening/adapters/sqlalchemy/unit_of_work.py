"""SQLAlchemy-backed unit of work for the submission aggregate."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from account_opening.adapters.sqlalchemy.mappings import start_mappers
from account_opening.adapters.sqlalchemy.migrations import upgrade_head
from account_opening.adapters.sqlalchemy.repositories import (
    SqlAlchemyActivityLogRepository,
    SqlAlchemyAuditEntryRepository,
    SqlAlchemyBranchRepository,
    SqlAlchemyStaffAccountRepository,
    SqlAlchemySubmissionRepository,
)
from account_opening.config import get_database_config
from account_opening.domain.errors import DuplicateIdentityError, PersistenceError
from account_opening.domain.ports.unit_of_work import (
    RepositoryCollection,
    SubmissionRepositories,
)

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

    from account_opening.domain.errors import AccountOpeningError

log = logging.getLogger(__name__)

# SQLSTATE for unique_violation (PostgreSQL) and the SQLite message prefix.
UNIQUE_VIOLATION_SQLSTATE: Final[str] = "23505"
_SQLITE_UNIQUE_MARKER: Final[str] = "UNIQUE constraint failed"


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call account_opening.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the engine, mappers and schema (migrated to head)."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or create_engine(
        database_uri or get_database_config().uri, future=True
    )
    start_mappers()
    upgrade_head(engine=resolved_engine)
    _STATE.engine = resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


def translate_store_error(exc: SQLAlchemyError) -> AccountOpeningError:
    """Map a driver failure onto the core error taxonomy."""

    detail = str(getattr(exc, "orig", None) or exc)
    if isinstance(exc, IntegrityError):
        sqlstate = getattr(exc.orig, "pgcode", None) or getattr(exc.orig, "sqlstate", None)
        if sqlstate == UNIQUE_VIOLATION_SQLSTATE or _SQLITE_UNIQUE_MARKER in detail:
            return DuplicateIdentityError("A record with the same unique value already exists")
    return PersistenceError(detail=detail)


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections.

    Store exceptions raised inside the block or by ``commit`` are rolled back
    and re-raised as core errors.
    """

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

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
            self.session.close()
            self.session = None
        if isinstance(exc_value, SQLAlchemyError):
            log.warning(f"Rolled back unit of work after store error: {exc_value}")
            raise translate_store_error(exc_value) from exc_value
        return False

    def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            log.warning(f"Commit failed and was rolled back: {exc}")
            raise translate_store_error(exc) from exc

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
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


class SqlAlchemySubmissionUnitOfWork(BaseSqlAlchemyUnitOfWork[SubmissionRepositories]):
    """Unit of work managing SQLAlchemy sessions for submission writes and reads."""

    def _build_repositories(self, session: Session) -> SubmissionRepositories:
        return SubmissionRepositories(
            submissions=SqlAlchemySubmissionRepository(session),
            audit_entries=SqlAlchemyAuditEntryRepository(session),
            activity_log=SqlAlchemyActivityLogRepository(session),
            branches=SqlAlchemyBranchRepository(session),
            staff=SqlAlchemyStaffAccountRepository(session),
        )


if TYPE_CHECKING:
    from account_opening.domain.ports.unit_of_work import SubmissionUnitOfWork

    _uow_check: SubmissionUnitOfWork = SqlAlchemySubmissionUnitOfWork()
