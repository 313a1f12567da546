from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

import pytest

from account_opening.domain.errors import AccessDeniedError, ValidationError
from account_opening.domain.model import ActivityAction, SubmissionStatus
from account_opening.domain.submissions import (
    DateRange,
    create_submission,
    delete_by_status,
    edit_submission,
    export_filtered,
    parse_status_filter,
)
from tests.helpers.submissions import (
    GLOBAL_ADMIN,
    branch_admin,
    create_approved,
    create_with_status,
    make_payload,
    staff,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from account_opening.adapters.sqlalchemy import SqlAlchemySubmissionUnitOfWork
    from tests.helpers.clock import FixedClock

    UnitOfWorkFactory = Callable[[], SqlAlchemySubmissionUnitOfWork]


def test_date_range_is_inclusive_by_day() -> None:
    window = DateRange(start=date(2025, 3, 1), end=date(2025, 3, 1))

    assert window.start_at == datetime(2025, 3, 1, tzinfo=UTC)
    assert window.end_before == datetime(2025, 3, 2, tzinfo=UTC)
    with pytest.raises(ValidationError):
        DateRange(start=date(2025, 3, 2), end=date(2025, 3, 1))


def test_parse_status_filter() -> None:
    assert parse_status_filter("all") == tuple(SubmissionStatus)
    assert parse_status_filter(" Rejected ") == (SubmissionStatus.REJECTED,)
    with pytest.raises(ValidationError):
        parse_status_filter("archived")


def test_export_filters_by_day_and_branch(
    sqlite_unit_of_work: UnitOfWorkFactory, clock: FixedClock
) -> None:
    create_submission(
        make_payload("1", branch_id=1), unit_of_work_factory=sqlite_unit_of_work, clock=clock
    )
    clock.advance(days=1)
    create_submission(
        make_payload("2", branch_id=1), unit_of_work_factory=sqlite_unit_of_work, clock=clock
    )
    create_submission(
        make_payload("3", branch_id=2), unit_of_work_factory=sqlite_unit_of_work, clock=clock
    )

    everything = export_filtered(GLOBAL_ADMIN, unit_of_work_factory=sqlite_unit_of_work)
    second_day = export_filtered(
        GLOBAL_ADMIN,
        DateRange(start=date(2025, 3, 2), end=date(2025, 3, 2)),
        unit_of_work_factory=sqlite_unit_of_work,
    )
    own_branch = export_filtered(branch_admin(1), unit_of_work_factory=sqlite_unit_of_work)

    assert [s.personal.identity_number for s in everything] == ["1", "2", "3"]
    assert [s.personal.identity_number for s in second_day] == ["2", "3"]
    assert [s.personal.identity_number for s in own_branch] == ["1", "2"]


def test_export_returns_complete_aggregates(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    create_submission(
        make_payload(
            rekening_untuk_sendiri="false",
            bo_nama="Budi",
            edd_bank_lain=[{"bank_name": "BRI", "account_type": "Giro", "account_number": "7"}],
        ),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    (exported,) = export_filtered(GLOBAL_ADMIN, unit_of_work_factory=sqlite_unit_of_work)

    assert exported.beneficial_owner is not None
    assert exported.beneficial_owner.name == "Budi"
    assert exported.other_bank_holdings[0].account_number == "7"


def test_export_rejects_foreign_branch_filter(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    with pytest.raises(AccessDeniedError):
        export_filtered(branch_admin(1), branch_filter=2, unit_of_work_factory=sqlite_unit_of_work)


def test_delete_by_status_removes_dependents(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    rejected_id = create_with_status(sqlite_unit_of_work, SubmissionStatus.REJECTED, "1")
    create_with_status(sqlite_unit_of_work, SubmissionStatus.PENDING, "2")
    edited_id = create_approved(sqlite_unit_of_work, "3")
    edit_submission(
        edited_id, {"kota": "Depok"}, GLOBAL_ADMIN, unit_of_work_factory=sqlite_unit_of_work
    )
    create_with_status(sqlite_unit_of_work, SubmissionStatus.REJECTED, "4", branch_id=2)

    result = delete_by_status(
        "rejected", 1, GLOBAL_ADMIN, unit_of_work_factory=sqlite_unit_of_work
    )
    purged_all = delete_by_status(
        SubmissionStatus.APPROVED, None, GLOBAL_ADMIN, unit_of_work_factory=sqlite_unit_of_work
    )

    assert result.deleted_count == 1
    assert purged_all.deleted_count == 1
    with sqlite_unit_of_work() as uow:
        repositories = uow.repositories
        assert repositories.submissions.get(rejected_id) is None
        assert repositories.submissions.get(edited_id) is None
        assert repositories.audit_entries.list_for_submission(edited_id) == []
        assert len(repositories.submissions.find_by_identity_number("4")) == 1
        actions = [entry.action for entry in repositories.activity_log.list_recent()]
        assert actions.count(ActivityAction.DELETE_SUBMISSIONS) == 2


def test_branch_admin_purge_skips_global_admin_records(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    create_submission(make_payload("1"), unit_of_work_factory=sqlite_unit_of_work)
    create_submission(make_payload("2"), GLOBAL_ADMIN, unit_of_work_factory=sqlite_unit_of_work)

    result = delete_by_status(
        "all", None, branch_admin(1), unit_of_work_factory=sqlite_unit_of_work
    )

    assert result.deleted_count == 1
    with sqlite_unit_of_work() as uow:
        assert uow.repositories.submissions.find_by_identity_number("2")


def test_staff_cannot_purge(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    with pytest.raises(AccessDeniedError):
        delete_by_status("all", None, staff(1), unit_of_work_factory=sqlite_unit_of_work)


def test_empty_purge_writes_no_activity(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    result = delete_by_status("all", None, GLOBAL_ADMIN, unit_of_work_factory=sqlite_unit_of_work)

    assert result.deleted_count == 0
    with sqlite_unit_of_work() as uow:
        assert uow.repositories.activity_log.list_recent() == []
