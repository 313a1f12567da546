"""Result and value types shared by the classifier, preview and apply passes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

    from account_opening.domain.model import Submission


class Classification(StrEnum):
    """How an external record relates to existing submissions with its identity number."""

    NEW = "new"
    REPLACEABLE = "replaceable"
    BLOCKED = "blocked"
    INVALID = "invalid"


@dataclass(frozen=True, slots=True, kw_only=True)
class ClassifiedRecord:
    classification: Classification
    identity_number: str | None
    target: Submission | None = None
    matches: tuple[Submission, ...] = ()
    reason: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CrossBranchWarning:
    index: int
    identity_number: str | None
    record_branch_id: int | None
    message: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ImportPreview:
    total_records: int
    status_breakdown: dict[str, int]
    branch_breakdown: dict[int | None, int]
    new_records: int
    replaceable_records: int
    blocked_records: int
    invalid_records: int
    cross_branch_warnings: tuple[CrossBranchWarning, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class SkippedRecord:
    index: int
    identity_number: str | None
    reason: str


@dataclass(slots=True, kw_only=True)
class ImportResult:
    imported: int = 0
    overwritten: int = 0
    skipped: int = 0
    total: int = 0
    skipped_records: list[SkippedRecord] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.imported + self.overwritten + self.skipped

    def as_dict(self) -> dict[str, int]:
        return {
            "imported": self.imported,
            "overwritten": self.overwritten,
            "skipped": self.skipped,
            "total": self.total,
        }


@dataclass(frozen=True, slots=True)
class ProgressSnapshot:
    progress: int
    message: str
    timestamp: datetime

    def __post_init__(self) -> None:
        if not 0 <= self.progress <= 100:  # noqa: PLR2004
            raise ValueError(f"progress must be within 0..100, got {self.progress}")


