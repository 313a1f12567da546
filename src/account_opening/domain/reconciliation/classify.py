"""Classify external records against existing submissions by identity number.

The lookup is global: a pending or approved submission in any branch blocks
the record, and only rejected matches can be replaced.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from account_opening.domain.errors import ValidationError
from account_opening.domain.fields import CanonicalRecord, normalize_record
from account_opening.domain.model import SubmissionStatus

from .contracts import Classification, ClassifiedRecord

if TYPE_CHECKING:
    from collections.abc import Mapping

    from account_opening.domain.ports import SubmissionRepository


def canonicalize(raw: Mapping[str, object] | CanonicalRecord) -> CanonicalRecord:
    return raw if isinstance(raw, CanonicalRecord) else normalize_record(raw)


def classify_record(record: CanonicalRecord, repository: SubmissionRepository) -> ClassifiedRecord:
    identity_number = record.identity_number
    if not identity_number:
        return ClassifiedRecord(
            classification=Classification.INVALID,
            identity_number=None,
            reason="Record has no identity number",
        )

    matches = tuple(repository.find_by_identity_number(identity_number))
    if not matches:
        return ClassifiedRecord(classification=Classification.NEW, identity_number=identity_number)

    active = [match for match in matches if match.is_active]
    if active:
        return ClassifiedRecord(
            classification=Classification.BLOCKED,
            identity_number=identity_number,
            target=active[0],
            matches=matches,
            reason=(
                f"Identity number {identity_number} is {active[0].status} "
                f"in branch {active[0].branch_id}"
            ),
        )

    # newest first, so the first rejected match is the most recent one
    target = next(match for match in matches if match.status is SubmissionStatus.REJECTED)
    return ClassifiedRecord(
        classification=Classification.REPLACEABLE,
        identity_number=identity_number,
        target=target,
        matches=matches,
    )


def classify(
    raw: Mapping[str, object] | CanonicalRecord, repository: SubmissionRepository
) -> ClassifiedRecord:
    """Classify one external record; malformed input is reported as ``INVALID``."""

    try:
        record = canonicalize(raw)
    except ValidationError as exc:
        return ClassifiedRecord(
            classification=Classification.INVALID, identity_number=None, reason=str(exc)
        )
    return classify_record(record, repository)
