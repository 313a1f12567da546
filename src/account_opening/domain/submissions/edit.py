"""Post-approval edits driven by the declarative field catalogue.

Incoming keys are resolved to canonical fields, normalized and compared as
text with the stored values. Every effective change yields one audit entry;
the aggregate, its audit rows and the activity entry commit together.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from account_opening.domain.access import Action, ensure_submission_access
from account_opening.domain.errors import (
    DuplicateIdentityError,
    NoChangeError,
    NotFoundError,
    ValidationError,
)
from account_opening.domain.fields import (
    CollectionDefinition,
    FieldDefinition,
    Section,
    resolve_key,
)
from account_opening.domain.model import (
    ActivityAction,
    ActivityLogEntry,
    AuditEntry,
    BeneficialOwner,
    EmergencyContact,
    OtherBankHolding,
    OtherOccupation,
    utc_now,
)
from account_opening.domain.normalization import first_present, render_value

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from account_opening.domain.model import Actor, Clock, Submission
    from account_opening.domain.ports import SubmissionUnitOfWorkFactory

log = getLogger(__name__)

BENEFICIAL_OWNER_CLEARED: Final[str] = "beneficial_owner"
_IGNORED_KEYS: Final[frozenset[str]] = frozenset({"isEdit", "is_edit"})


@dataclass(frozen=True, slots=True)
class EditResult:
    changed_field_count: int
    audit_entries: tuple[AuditEntry, ...]


@dataclass(frozen=True, slots=True)
class _FieldChange:
    definition: FieldDefinition
    value: object
    old_text: str | None
    new_text: str | None


@dataclass(frozen=True, slots=True)
class _CollectionChange:
    definition: CollectionDefinition
    items: tuple[dict[str, str | None], ...]
    old_text: str
    new_text: str


def edit_submission(
    submission_id: int,
    changes: Mapping[str, object],
    actor: Actor,
    reason: str | None = None,
    *,
    unit_of_work_factory: SubmissionUnitOfWorkFactory,
    clock: Clock = utc_now,
) -> EditResult:
    """Apply ``changes`` to an approved submission and audit every effective change."""

    fields, collections = _resolve_incoming(changes)

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        submission = repositories.submissions.get(submission_id)
        if submission is None:
            raise NotFoundError(f"Submission {submission_id} not found")
        ensure_submission_access(actor, Action.EDIT, submission)
        submission.ensure_editable()

        field_changes = _diff_fields(submission, fields)
        collection_changes = _diff_collections(submission, collections)
        if not field_changes and not collection_changes:
            raise NoChangeError(
                f"No effective changes for submission {submission.reference_code}"
            )

        identity_change = _find(field_changes, "identity_number")
        if identity_change is not None and repositories.submissions.has_active_identity(
            str(identity_change.value), exclude_id=submission.id
        ):
            raise DuplicateIdentityError(
                f"An active submission for identity number {identity_change.value} already exists"
            )

        now = clock()
        by = actor.label
        previous_owner = submission.beneficial_owner
        submission.freeze_original_approval()
        owner_cleared = _apply_field_changes(submission, field_changes)
        for change in collection_changes:
            _replace_collection(submission, change)
        submission.record_edit(by=by, at=now)

        # owner entries queued alongside a flip to self stay audited; the row itself is gone
        entries = [
            AuditEntry(
                submission_id=submission_id,
                field_name=change.definition.name,
                old_value=change.old_text,
                new_value=change.new_text,
                reason=reason,
                actor=by,
                created_at=now,
            )
            for change in (*field_changes, *collection_changes)
        ]
        changed_count = len(entries)
        if owner_cleared:
            entries.append(
                AuditEntry(
                    submission_id=submission_id,
                    field_name=BENEFICIAL_OWNER_CLEARED,
                    old_value=previous_owner.name if previous_owner is not None else None,
                    new_value=None,
                    reason="Beneficial owner removed: account is opened for self",
                    actor=by,
                    created_at=now,
                )
            )
        for entry in entries:
            repositories.audit_entries.add(entry)
        repositories.activity_log.add(
            ActivityLogEntry(
                action=ActivityAction.EDIT_SUBMISSION,
                description=(
                    f"Edited {changed_count} field(s) of submission {submission.reference_code}"
                ),
                actor_id=actor.id,
                actor_label=by,
                branch_id=submission.branch_id,
                created_at=now,
            )
        )
        uow.commit()

    log.info(
        f"Edited submission {submission.reference_code}: {changed_count} field(s) by {by} "
        f"(edit #{submission.edit_count})"
    )
    return EditResult(changed_field_count=changed_count, audit_entries=tuple(entries))


# Incoming keys -----------------------------------------------------------------


def _resolve_incoming(
    changes: Mapping[str, object],
) -> tuple[list[tuple[FieldDefinition, object]], list[tuple[CollectionDefinition, object]]]:
    touched: dict[str, FieldDefinition | CollectionDefinition] = {}
    for key in changes:
        if key in _IGNORED_KEYS or key.endswith("_custom"):
            continue
        definition = resolve_key(key)
        if definition is None:
            log.warning(f"Ignoring unknown edit field {key!r}")
            continue
        if isinstance(definition, FieldDefinition) and not definition.editable:
            log.warning(f"Ignoring non-editable field {key!r}")
            continue
        touched.setdefault(definition.name, definition)

    fields: list[tuple[FieldDefinition, object]] = []
    collections: list[tuple[CollectionDefinition, object]] = []
    for definition in touched.values():
        # several aliases of one field: canonical priority order, all blank means "clear"
        value = first_present(changes, definition.keys)
        if isinstance(definition, FieldDefinition):
            fields.append((definition, value))
        else:
            collections.append((definition, value))
    return fields, collections


# Diffing -----------------------------------------------------------------------


def _current_value(submission: Submission, definition: FieldDefinition) -> object:
    section = getattr(submission, definition.section.value)
    if section is None:
        return None
    return getattr(section, definition.attribute)


def _diff_fields(
    submission: Submission, incoming: Sequence[tuple[FieldDefinition, object]]
) -> list[_FieldChange]:
    staged: list[_FieldChange] = []
    for definition, raw in incoming:
        value = definition.normalize(raw)
        if value is None:
            value = definition.default
        if value is None and definition.required:
            raise ValidationError(f"{definition.name} is required and cannot be cleared")
        old_text = render_value(_current_value(submission, definition))
        new_text = render_value(value)
        if old_text == new_text:
            continue
        staged.append(
            _FieldChange(definition=definition, value=value, old_text=old_text, new_text=new_text)
        )
    return staged


def _current_items(
    submission: Submission, definition: CollectionDefinition
) -> list[dict[str, str | None]]:
    return [
        {attribute: getattr(item, attribute) for attribute in definition.item_fields}
        for item in getattr(submission, definition.name)
    ]


def _diff_collections(
    submission: Submission, incoming: Sequence[tuple[CollectionDefinition, object]]
) -> list[_CollectionChange]:
    staged: list[_CollectionChange] = []
    for definition, raw in incoming:
        items = definition.normalize(raw) or ()
        old_text = json.dumps(_current_items(submission, definition), ensure_ascii=False)
        new_text = json.dumps(list(items), ensure_ascii=False)
        if old_text == new_text:
            continue
        staged.append(
            _CollectionChange(
                definition=definition, items=items, old_text=old_text, new_text=new_text
            )
        )
    return staged


def _find(changes: list[_FieldChange], name: str) -> _FieldChange | None:
    return next((change for change in changes if change.definition.name == name), None)


# Applying ----------------------------------------------------------------------


def _apply_field_changes(submission: Submission, changes: list[_FieldChange]) -> bool:
    """Write staged values; returns whether the beneficial owner was cleared.

    A flip of ``account_for_self`` to true always counts as a clearing, even
    when no owner row existed. Queued owner changes are then not applied.
    """

    owner_changes = [c for c in changes if c.definition.section is Section.BENEFICIAL_OWNER]
    ownership = _find(changes, "account_for_self")

    for change in changes:
        section = change.definition.section
        if section is Section.BENEFICIAL_OWNER:
            continue
        if section is Section.EMERGENCY_CONTACT and submission.emergency_contact is None:
            submission.emergency_contact = EmergencyContact()
        setattr(getattr(submission, section.value), change.definition.attribute, change.value)

    if submission.personal.account_for_self:
        flipped = ownership is not None
        if owner_changes and not flipped:
            raise ValidationError(
                "Beneficial owner fields cannot be changed while the account is opened for self"
            )
        existed = submission.clear_beneficial_owner()
        return flipped or existed

    if owner_changes:
        _upsert_beneficial_owner(submission, owner_changes)
    return False


def _upsert_beneficial_owner(submission: Submission, changes: list[_FieldChange]) -> None:
    values = {change.definition.attribute: change.value for change in changes}
    if "name" in values and values["name"] is None:
        raise ValidationError("bo_name is required and cannot be cleared")
    owner = submission.beneficial_owner
    if owner is None:
        if values.get("name") is None:
            raise ValidationError("bo_name is required to record a beneficial owner")
        submission.beneficial_owner = BeneficialOwner(**values)  # type: ignore[arg-type]
        return
    for attribute, value in values.items():
        setattr(owner, attribute, value)


def _replace_collection(submission: Submission, change: _CollectionChange) -> None:
    if change.definition.name == "other_bank_holdings":
        submission.replace_other_bank_holdings(
            OtherBankHolding(**item)  # type: ignore[arg-type]
            for item in change.items
        )
    else:
        submission.replace_other_occupations(
            OtherOccupation(**item)  # type: ignore[arg-type]
            for item in change.items
        )
