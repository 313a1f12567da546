"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from account_opening.domain.ports.persistence import (
        ActivityLogRepository,
        AuditEntryRepository,
        BranchRepository,
        StaffAccountRepository,
        SubmissionRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """One store transaction around a repository collection.

    Leaving the context without ``commit`` discards all writes; store failures
    surface as ``PersistenceError`` (or ``DuplicateIdentityError`` for uniqueness
    violations) after the rollback.
    """

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class SubmissionRepositories(RepositoryCollection):
    """Repositories touched by submission writes, audits and imports."""

    submissions: SubmissionRepository
    audit_entries: AuditEntryRepository
    activity_log: ActivityLogRepository
    branches: BranchRepository
    staff: StaffAccountRepository


type SubmissionUnitOfWork = UnitOfWork[SubmissionRepositories]
type SubmissionUnitOfWorkFactory = Callable[[], SubmissionUnitOfWork]
