"""Ports (protocols) the domain depends on."""

from __future__ import annotations

from .notification import NotificationError, Notifier
from .persistence import (
    ActivityLogRepository,
    AuditEntryRepository,
    BranchRepository,
    Repository,
    StaffAccountRepository,
    SubmissionRepository,
)
from .progress import ProgressLedger
from .unit_of_work import (
    RepositoryCollection,
    SubmissionRepositories,
    SubmissionUnitOfWork,
    SubmissionUnitOfWorkFactory,
    UnitOfWork,
)

__all__ = [
    "ActivityLogRepository",
    "AuditEntryRepository",
    "BranchRepository",
    "NotificationError",
    "Notifier",
    "ProgressLedger",
    "Repository",
    "RepositoryCollection",
    "StaffAccountRepository",
    "SubmissionRepositories",
    "SubmissionRepository",
    "SubmissionUnitOfWork",
    "SubmissionUnitOfWorkFactory",
    "UnitOfWork",
]
