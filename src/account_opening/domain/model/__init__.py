from __future__ import annotations

from .actor import Actor
from .audit import ActivityLogEntry, AuditEntry
from .base import Clock, utc_now
from .enums import (
    ACTIVE_STATUSES,
    ActivityAction,
    ActorRole,
    CustomerType,
    NotificationKind,
    SubmissionStatus,
)
from .organization import Branch, StaffAccount
from .submission import (
    AccountConfig,
    BeneficialOwner,
    EmergencyContact,
    EmploymentProfile,
    OtherBankHolding,
    OtherOccupation,
    PersonalProfile,
    Submission,
)

__all__ = [
    "ACTIVE_STATUSES",
    "AccountConfig",
    "ActivityAction",
    "ActivityLogEntry",
    "Actor",
    "ActorRole",
    "AuditEntry",
    "BeneficialOwner",
    "Branch",
    "Clock",
    "CustomerType",
    "EmergencyContact",
    "EmploymentProfile",
    "NotificationKind",
    "OtherBankHolding",
    "OtherOccupation",
    "PersonalProfile",
    "StaffAccount",
    "Submission",
    "SubmissionStatus",
    "utc_now",
]
