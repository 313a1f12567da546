"""Transactional creation of a submission aggregate."""

from __future__ import annotations

import random
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from account_opening.domain.errors import DuplicateIdentityError, ValidationError
from account_opening.domain.fields import (
    OTHER_BANK_HOLDINGS,
    OTHER_OCCUPATIONS,
    CanonicalRecord,
    Section,
    normalize_record,
)
from account_opening.domain.model import (
    AccountConfig,
    BeneficialOwner,
    EmergencyContact,
    EmploymentProfile,
    OtherBankHolding,
    OtherOccupation,
    PersonalProfile,
    Submission,
    SubmissionStatus,
    utc_now,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from datetime import datetime

    from account_opening.domain.model import Actor, Clock
    from account_opening.domain.ports import SubmissionRepositories, SubmissionUnitOfWorkFactory

log = getLogger(__name__)

REFERENCE_PREFIX = "REG"


@dataclass(frozen=True, slots=True)
class CreateResult:
    id: int
    reference_code: str


def generate_reference_code(now: datetime) -> str:
    """``REG-<epoch millis>-<0..999>``; collisions are possible and not prevented."""
    return f"{REFERENCE_PREFIX}-{int(now.timestamp() * 1000)}-{random.randint(0, 999)}"


def create_submission(
    payload: Mapping[str, object] | CanonicalRecord,
    actor: Actor | None = None,
    *,
    unit_of_work_factory: SubmissionUnitOfWorkFactory,
    clock: Clock = utc_now,
    reference_factory: Callable[[datetime], str] = generate_reference_code,
    carry_status: bool = False,
) -> CreateResult:
    """Insert a submission with all of its sections in one transaction.

    ``actor`` is ``None`` for the public form. With ``carry_status`` the record's
    own status and approval or rejection stamps are kept instead of ``pending``;
    batch import uses this for records that do not exist yet.
    """

    record = payload if isinstance(payload, CanonicalRecord) else normalize_record(payload)
    missing = record.missing_required()
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    now = clock()
    submission = build_submission(
        record, actor, created_at=now, reference_code=reference_factory(now)
    )
    if carry_status:
        _carry_status(submission, record, actor, now)

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        _check_branch(repositories, submission.branch_id)
        if repositories.submissions.has_active_identity(submission.personal.identity_number):
            raise DuplicateIdentityError(
                f"An active submission for identity number "
                f"{submission.personal.identity_number} already exists"
            )
        repositories.submissions.add(submission)
        uow.commit()

    if submission.id is None:
        raise RuntimeError("Submission was committed without an id")
    log.info(
        f"Created submission {submission.reference_code} (id={submission.id}, "
        f"branch={submission.branch_id}, status={submission.status})"
    )
    return CreateResult(id=submission.id, reference_code=submission.reference_code)


def build_submission(
    record: CanonicalRecord,
    actor: Actor | None,
    *,
    created_at: datetime,
    reference_code: str,
) -> Submission:
    """Compose the aggregate from a complete canonical record (no store access)."""

    personal = PersonalProfile(**record.section(Section.PERSONAL))  # type: ignore[arg-type]
    emergency_contact = (
        EmergencyContact(**record.section(Section.EMERGENCY_CONTACT))  # type: ignore[arg-type]
        if record.has_any(Section.EMERGENCY_CONTACT)
        else None
    )
    beneficial_owner = None
    if not personal.account_for_self and record.get("bo_name") is not None:
        beneficial_owner = BeneficialOwner(
            **record.section(Section.BENEFICIAL_OWNER)  # type: ignore[arg-type]
        )

    branch_id = record.branch_id
    if branch_id is None:
        raise ValidationError("Missing required fields: branch_id")

    return Submission(
        branch_id=branch_id,
        reference_code=reference_code,
        status=SubmissionStatus.PENDING,
        created_at=created_at,
        created_by_role=actor.role if actor is not None else None,
        personal=personal,
        employment=EmploymentProfile(
            **record.section(Section.EMPLOYMENT)  # type: ignore[arg-type]
        ),
        account=AccountConfig(**record.section(Section.ACCOUNT)),  # type: ignore[arg-type]
        emergency_contact=emergency_contact,
        beneficial_owner=beneficial_owner,
        other_bank_holdings=[
            OtherBankHolding(**item)  # type: ignore[arg-type]
            for item in record.collections.get(OTHER_BANK_HOLDINGS.name) or ()
        ],
        other_occupations=[
            OtherOccupation(**item)  # type: ignore[arg-type]
            for item in record.collections.get(OTHER_OCCUPATIONS.name) or ()
        ],
    )


def _carry_status(
    submission: Submission,
    record: CanonicalRecord,
    actor: Actor | None,
    now: datetime,
) -> None:
    status = record.status
    if status is None or status is SubmissionStatus.PENDING:
        return
    fallback = actor.label if actor is not None else "import"
    if status is SubmissionStatus.APPROVED:
        by, at = record.get("approved_by"), record.get("approved_at")
    else:
        by, at = record.get("rejected_by"), record.get("rejected_at")
    submission.change_status(
        status,
        by=by if isinstance(by, str) else fallback,
        at=at if at is not None else now,  # type: ignore[arg-type]
    )


def _check_branch(repositories: SubmissionRepositories, branch_id: int) -> None:
    branch = repositories.branches.get(branch_id)
    if branch is None or not branch.is_active:
        raise ValidationError(f"Unknown or inactive branch: {branch_id}")
