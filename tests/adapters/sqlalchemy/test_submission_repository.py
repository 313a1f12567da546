from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from account_opening.domain.model import SubmissionStatus
from account_opening.domain.submissions import create_submission
from tests.helpers.submissions import GLOBAL_ADMIN, create_with_status, make_payload

if TYPE_CHECKING:
    from collections.abc import Callable

    from account_opening.adapters.sqlalchemy import SqlAlchemySubmissionUnitOfWork

    UnitOfWorkFactory = Callable[[], SqlAlchemySubmissionUnitOfWork]


def test_has_active_identity_ignores_rejected_and_excluded(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    create_with_status(sqlite_unit_of_work, SubmissionStatus.REJECTED, "1")
    pending_id = create_with_status(sqlite_unit_of_work, SubmissionStatus.PENDING, "2")

    with sqlite_unit_of_work() as uow:
        repository = uow.repositories.submissions
        assert not repository.has_active_identity("1")
        assert repository.has_active_identity("2")
        assert not repository.has_active_identity("2", exclude_id=pending_id)


def test_list_created_between_uses_half_open_window(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    start = datetime(2025, 3, 1, tzinfo=UTC)
    for offset, identity in enumerate(("1", "2", "3")):
        create_submission(
            make_payload(identity),
            GLOBAL_ADMIN,
            unit_of_work_factory=sqlite_unit_of_work,
            clock=lambda offset=offset: start + timedelta(days=offset),
        )

    with sqlite_unit_of_work() as uow:
        window = uow.repositories.submissions.list_created_between(
            start=start, end=start + timedelta(days=2), branch_id=1
        )

    assert [s.personal.identity_number for s in window] == ["1", "2"]


def test_list_by_status_and_branch(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    create_with_status(sqlite_unit_of_work, SubmissionStatus.REJECTED, "1", branch_id=1)
    create_with_status(sqlite_unit_of_work, SubmissionStatus.REJECTED, "2", branch_id=2)
    create_with_status(sqlite_unit_of_work, SubmissionStatus.APPROVED, "3", branch_id=2)

    with sqlite_unit_of_work() as uow:
        repository = uow.repositories.submissions
        rejected = repository.list_by_status([SubmissionStatus.REJECTED], branch_id=None)
        branch_two = repository.list_by_status(list(SubmissionStatus), branch_id=2)

    assert [s.personal.identity_number for s in rejected] == ["1", "2"]
    assert [s.personal.identity_number for s in branch_two] == ["2", "3"]


def test_staff_lookup_by_username(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    with sqlite_unit_of_work() as uow:
        staff = uow.repositories.staff.get_by_username("admin.cabang2")
        assert staff is not None
        assert staff.branch_id == 2
        assert uow.repositories.staff.get_by_username("nobody") is None
