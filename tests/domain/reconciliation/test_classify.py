from __future__ import annotations

from typing import TYPE_CHECKING

from account_opening.domain.model import SubmissionStatus
from account_opening.domain.reconciliation import Classification, classify
from tests.helpers.submissions import create_with_status, make_payload

if TYPE_CHECKING:
    from collections.abc import Callable

    from account_opening.adapters.sqlalchemy import SqlAlchemySubmissionUnitOfWork

    UnitOfWorkFactory = Callable[[], SqlAlchemySubmissionUnitOfWork]


def _classify(factory: UnitOfWorkFactory, raw: dict[str, object]) -> Classification:
    with factory() as uow:
        return classify(raw, uow.repositories.submissions).classification


def test_unknown_identity_is_new(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    assert _classify(sqlite_unit_of_work, make_payload("1")) is Classification.NEW


def test_active_match_in_any_branch_blocks(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    create_with_status(sqlite_unit_of_work, SubmissionStatus.PENDING, "1", branch_id=5)
    create_with_status(sqlite_unit_of_work, SubmissionStatus.APPROVED, "2", branch_id=5)

    with sqlite_unit_of_work() as uow:
        classified = classify(make_payload("1", branch_id=1), uow.repositories.submissions)

    assert classified.classification is Classification.BLOCKED
    assert classified.target is not None
    assert classified.target.branch_id == 5
    assert classified.reason is not None
    assert "branch 5" in classified.reason
    assert _classify(sqlite_unit_of_work, make_payload("2")) is Classification.BLOCKED


def test_only_rejected_matches_are_replaceable(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    older = create_with_status(sqlite_unit_of_work, SubmissionStatus.REJECTED, "1")
    newer = create_with_status(sqlite_unit_of_work, SubmissionStatus.REJECTED, "1", branch_id=2)

    with sqlite_unit_of_work() as uow:
        classified = classify(make_payload("1"), uow.repositories.submissions)

    assert classified.classification is Classification.REPLACEABLE
    assert classified.target is not None
    assert classified.target.id == newer
    assert {match.id for match in classified.matches} == {older, newer}


def test_rejected_and_active_match_still_blocks(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    create_with_status(sqlite_unit_of_work, SubmissionStatus.REJECTED, "1")
    create_with_status(sqlite_unit_of_work, SubmissionStatus.PENDING, "1")

    assert _classify(sqlite_unit_of_work, make_payload("1")) is Classification.BLOCKED


def test_records_without_identity_or_with_bad_values_are_invalid(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    assert _classify(sqlite_unit_of_work, {"name": "Ani"}) is Classification.INVALID
    assert (
        _classify(sqlite_unit_of_work, make_payload("1", birthDate="kemarin"))
        is Classification.INVALID
    )
