"""Ports for persisting the submission aggregate and its satellites."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence
    from datetime import datetime

    from account_opening.domain.model import (
        ActivityLogEntry,
        AuditEntry,
        Branch,
        StaffAccount,
        Submission,
        SubmissionStatus,
    )


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class SubmissionRepository(Repository["Submission"], Protocol):
    """Persistence contract for submission aggregates (root plus all children)."""

    def get(self, submission_id: int) -> Submission | None: ...

    def find_by_identity_number(self, identity_number: str) -> list[Submission]:
        """All submissions sharing ``identity_number`` across branches, newest first."""
        ...

    def has_active_identity(
        self, identity_number: str, *, exclude_id: int | None = None
    ) -> bool: ...

    def list_created_between(
        self,
        *,
        start: datetime | None,
        end: datetime | None,
        branch_id: int | None,
    ) -> list[Submission]: ...

    def list_by_status(
        self, statuses: Collection[SubmissionStatus], *, branch_id: int | None
    ) -> list[Submission]: ...

    def delete_many(self, submission_ids: Sequence[int]) -> int:
        """Hard-delete submissions and every dependent row; returns roots removed."""
        ...


@runtime_checkable
class AuditEntryRepository(Repository["AuditEntry"], Protocol):
    """Append-only: there is deliberately no update or delete."""

    def list_for_submission(self, submission_id: int) -> list[AuditEntry]: ...


@runtime_checkable
class ActivityLogRepository(Repository["ActivityLogEntry"], Protocol):
    def list_recent(self, *, limit: int = 50) -> list[ActivityLogEntry]: ...


@runtime_checkable
class BranchRepository(Repository["Branch"], Protocol):
    def get(self, branch_id: int) -> Branch | None: ...


@runtime_checkable
class StaffAccountRepository(Repository["StaffAccount"], Protocol):
    def get_by_username(self, username: str) -> StaffAccount | None: ...
