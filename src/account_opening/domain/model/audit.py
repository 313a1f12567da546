"""Append-only records: field-level edit audit and coarse activity log."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .base import utc_now

if TYPE_CHECKING:
    from datetime import datetime

    from .enums import ActivityAction


@dataclass(eq=False, kw_only=True)
class AuditEntry:
    """One field change made by a post-approval edit. Never mutated after insert."""

    id: int | None = None
    submission_id: int
    field_name: str
    old_value: str | None = None
    new_value: str | None = None
    reason: str | None = None
    actor: str
    created_at: datetime = field(default_factory=utc_now)


@dataclass(eq=False, kw_only=True)
class ActivityLogEntry:
    id: int | None = None
    action: ActivityAction
    description: str
    actor_id: int | None = None
    actor_label: str | None = None
    branch_id: int | None = None
    created_at: datetime = field(default_factory=utc_now)
