"""Flatten submission aggregates into canonical backup records."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

from account_opening.domain.fields import COLLECTIONS, FIELDS, Section
from account_opening.domain.model import utc_now

from .schema import BackupEnvelope, BackupMetadata

if TYPE_CHECKING:
    from collections.abc import Iterable

    from account_opening.domain.model import Clock, Submission


def _json_value(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        # numbers, not strings: the currency normalizer reads "." as a thousands separator
        return int(value) if value == value.to_integral_value() else float(value)
    if hasattr(value, "isoformat"):
        return value.isoformat()  # type: ignore[union-attr]
    return value


def submission_to_record(submission: Submission) -> dict[str, Any]:
    """One flat record keyed by canonical field names, readable by ``normalize_record``."""

    record: dict[str, Any] = {
        "id": submission.id,
        "reference_code": submission.reference_code,
        "created_at": _json_value(submission.created_at),
        "edit_count": submission.edit_count,
        "original_approved_by": submission.original_approved_by,
        "original_approved_at": _json_value(submission.original_approved_at),
    }
    for definition in FIELDS:
        if definition.section is Section.SUBMISSION:
            holder: object = submission
        else:
            holder = getattr(submission, definition.section.value)
        value = getattr(holder, definition.attribute) if holder is not None else None
        record[definition.name] = _json_value(value)
    for collection in COLLECTIONS:
        record[collection.name] = [
            {attribute: getattr(item, attribute) for attribute in collection.item_fields}
            for item in getattr(submission, collection.name)
        ]
    return record


def build_backup(
    submissions: Iterable[Submission],
    *,
    exported_by: str | None = None,
    clock: Clock = utc_now,
) -> BackupEnvelope:
    data = [submission_to_record(submission) for submission in submissions]
    return BackupEnvelope(
        metadata=BackupMetadata(
            exported_at=clock(),
            exported_by=exported_by,
            total_records=len(data),
        ),
        data=data,
    )


def dump_backup(envelope: BackupEnvelope, *, indent: int | None = 2) -> str:
    return envelope.model_dump_json(by_alias=True, indent=indent)
