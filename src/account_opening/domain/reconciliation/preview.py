"""Dry-run pass over a batch: classify every record without writing."""

from __future__ import annotations

from collections import Counter
from logging import getLogger
from typing import TYPE_CHECKING

from account_opening.domain.access import Action, Scope, ensure_allowed, scope_for
from account_opening.domain.errors import ValidationError

from .classify import canonicalize, classify_record
from .contracts import Classification, CrossBranchWarning, ImportPreview

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from account_opening.domain.model import Actor
    from account_opening.domain.ports import SubmissionUnitOfWorkFactory

log = getLogger(__name__)

UNKNOWN_STATUS = "unknown"


def preview_import(
    records: Sequence[Mapping[str, object]],
    actor: Actor,
    *,
    unit_of_work_factory: SubmissionUnitOfWorkFactory,
) -> ImportPreview:
    ensure_allowed(actor, Action.IMPORT)
    branch_scoped = scope_for(actor, Action.IMPORT) is Scope.BRANCH

    statuses: Counter[str] = Counter()
    branches: Counter[int | None] = Counter()
    classes: Counter[Classification] = Counter()
    warnings: list[CrossBranchWarning] = []

    with unit_of_work_factory() as uow:
        repository = uow.repositories.submissions
        for index, raw in enumerate(records):
            try:
                record = canonicalize(raw)
            except ValidationError as exc:
                log.debug(f"Preview record {index} is invalid: {exc}")
                statuses[UNKNOWN_STATUS] += 1
                branches[None] += 1
                classes[Classification.INVALID] += 1
                continue

            status = record.status
            statuses[str(status) if status is not None else "pending"] += 1
            branches[record.branch_id] += 1
            classified = classify_record(record, repository)
            classes[classified.classification] += 1

            if branch_scoped and record.branch_id != actor.branch_id:
                warnings.append(
                    CrossBranchWarning(
                        index=index,
                        identity_number=record.identity_number,
                        record_branch_id=record.branch_id,
                        message=(
                            f"Record belongs to branch {record.branch_id}, outside branch "
                            f"{actor.branch_id}; it will be skipped"
                        ),
                    )
                )

    return ImportPreview(
        total_records=len(records),
        status_breakdown=dict(statuses),
        branch_breakdown=dict(branches),
        new_records=classes[Classification.NEW],
        replaceable_records=classes[Classification.REPLACEABLE],
        blocked_records=classes[Classification.BLOCKED],
        invalid_records=classes[Classification.INVALID],
        cross_branch_warnings=tuple(warnings),
    )
