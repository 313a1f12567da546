from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from account_opening.domain.errors import AccessDeniedError, NotFoundError
from account_opening.domain.model import SubmissionStatus
from account_opening.domain.submissions import (
    edit_submission,
    get_history,
    set_submission_status,
)
from tests.helpers.submissions import GLOBAL_ADMIN, branch_admin, create_approved

if TYPE_CHECKING:
    from collections.abc import Callable

    from account_opening.adapters.sqlalchemy import SqlAlchemySubmissionUnitOfWork
    from tests.helpers.clock import FixedClock

    UnitOfWorkFactory = Callable[[], SqlAlchemySubmissionUnitOfWork]


def test_history_of_unedited_submission(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    submission_id = create_approved(sqlite_unit_of_work)

    history = get_history(submission_id, unit_of_work_factory=sqlite_unit_of_work)

    assert history.edit_count == 0
    assert history.entries == ()
    assert history.original_approver == history.current_approver
    assert history.current_approver.name == GLOBAL_ADMIN.label


def test_history_keeps_first_approver_after_reapproval(
    sqlite_unit_of_work: UnitOfWorkFactory, clock: FixedClock
) -> None:
    submission_id = create_approved(sqlite_unit_of_work, clock=clock)
    first_approved_at = clock.now
    editor = branch_admin(1)

    clock.advance(hours=1)
    edit_submission(
        submission_id,
        {"kota": "Depok"},
        editor,
        unit_of_work_factory=sqlite_unit_of_work,
        clock=clock,
    )
    clock.advance(hours=1)
    edit_submission(
        submission_id,
        {"kota": "Bogor", "agama": "Islam"},
        editor,
        unit_of_work_factory=sqlite_unit_of_work,
        clock=clock,
    )
    clock.advance(hours=1)
    set_submission_status(
        submission_id,
        SubmissionStatus.APPROVED,
        editor,
        unit_of_work_factory=sqlite_unit_of_work,
        clock=clock,
    )

    history = get_history(submission_id, unit_of_work_factory=sqlite_unit_of_work, actor=editor)

    assert history.edit_count == 2
    assert history.original_approver.name == GLOBAL_ADMIN.label
    assert history.original_approver.at == first_approved_at
    assert history.current_approver.name == editor.label
    assert history.current_approver.at == clock.now
    # most recent first
    assert [entry.new_value for entry in history.entries][-1] == "Depok"
    assert len(history.entries) == 3


def test_history_checks_access(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    submission_id = create_approved(sqlite_unit_of_work, branch_id=5)

    with pytest.raises(AccessDeniedError):
        get_history(submission_id, unit_of_work_factory=sqlite_unit_of_work, actor=branch_admin(2))
    with pytest.raises(NotFoundError):
        get_history(999, unit_of_work_factory=sqlite_unit_of_work)
