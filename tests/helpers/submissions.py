"""Builders for submission payloads and actors used across tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from account_opening.domain.model import Actor, ActorRole, SubmissionStatus, utc_now
from account_opening.domain.submissions import create_submission, set_submission_status

if TYPE_CHECKING:
    from account_opening.domain.model import Clock
    from account_opening.domain.ports import SubmissionUnitOfWorkFactory

BRANCH_IDS = (1, 2, 3, 4, 5)
INACTIVE_BRANCH_ID = 9

GLOBAL_ADMIN = Actor(id=1, role=ActorRole.GLOBAL_ADMIN, username="supervisor.pusat")


def branch_admin(branch_id: int, *, username: str | None = None) -> Actor:
    return Actor(
        id=100 + branch_id,
        role=ActorRole.BRANCH_ADMIN,
        branch_id=branch_id,
        username=username or f"admin.cabang{branch_id}",
    )


def staff(branch_id: int) -> Actor:
    return Actor(id=200 + branch_id, role=ActorRole.STAFF, branch_id=branch_id)


def make_payload(
    identity_number: str = "3271010101010001",
    *,
    branch_id: int = 1,
    **overrides: Any,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "name": "Ani Setyawati",
        "identityNumber": identity_number,
        "email": "ani@example.com",
        "phone": "081234567890",
        "birthDate": "2000-01-01",
        "branchId": branch_id,
    }
    payload.update(overrides)
    return payload


def create_approved(
    unit_of_work_factory: SubmissionUnitOfWorkFactory,
    identity_number: str = "3271010101010001",
    *,
    branch_id: int = 1,
    approver: Actor = GLOBAL_ADMIN,
    clock: Clock = utc_now,
    **overrides: Any,
) -> int:
    """Create a submission through the public path and approve it; returns its id."""

    created = create_submission(
        make_payload(identity_number, branch_id=branch_id, **overrides),
        unit_of_work_factory=unit_of_work_factory,
        clock=clock,
    )
    set_submission_status(
        created.id,
        SubmissionStatus.APPROVED,
        approver,
        unit_of_work_factory=unit_of_work_factory,
        clock=clock,
    )
    return created.id


def create_with_status(
    unit_of_work_factory: SubmissionUnitOfWorkFactory,
    status: SubmissionStatus,
    identity_number: str,
    *,
    branch_id: int = 1,
) -> int:
    created = create_submission(
        make_payload(identity_number, branch_id=branch_id),
        unit_of_work_factory=unit_of_work_factory,
    )
    if status is not SubmissionStatus.PENDING:
        set_submission_status(
            created.id, status, GLOBAL_ADMIN, unit_of_work_factory=unit_of_work_factory
        )
    return created.id
