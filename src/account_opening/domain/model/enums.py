"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SubmissionStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


ACTIVE_STATUSES: frozenset[SubmissionStatus] = frozenset(
    {SubmissionStatus.PENDING, SubmissionStatus.APPROVED}
)


class ActorRole(StrEnum):
    BRANCH_ADMIN = "branch_admin"
    GLOBAL_ADMIN = "global_admin"
    STAFF = "staff"


class CustomerType(StrEnum):
    NEW = "new"
    EXISTING = "existing"


class NotificationKind(StrEnum):
    APPROVED = "approved"
    REJECTED = "rejected"


class ActivityAction(StrEnum):
    EDIT_SUBMISSION = "EDIT_SUBMISSION"
    IMPORT_SUBMISSIONS = "IMPORT_SUBMISSIONS"
    DELETE_SUBMISSIONS = "DELETE_SUBMISSIONS"
