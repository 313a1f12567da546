"""SQLAlchemy adapter package."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .progress import SqlAlchemyProgressLedger
from .repositories import (
    SqlAlchemyActivityLogRepository,
    SqlAlchemyAuditEntryRepository,
    SqlAlchemyBranchRepository,
    SqlAlchemyStaffAccountRepository,
    SqlAlchemySubmissionRepository,
)
from .unit_of_work import (
    SqlAlchemySubmissionUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyActivityLogRepository",
    "SqlAlchemyAuditEntryRepository",
    "SqlAlchemyBranchRepository",
    "SqlAlchemyProgressLedger",
    "SqlAlchemyStaffAccountRepository",
    "SqlAlchemySubmissionRepository",
    "SqlAlchemySubmissionUnitOfWork",
    "StartupError",
    "configured_engine",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
