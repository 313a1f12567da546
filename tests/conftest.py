from __future__ import annotations

import os
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from account_opening.adapters.sqlalchemy import start_mappers
from account_opening.adapters.sqlalchemy.migrations import upgrade_head
from account_opening.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemySubmissionUnitOfWork,
    shutdown,
    startup,
)
from account_opening.domain.model import ActorRole, Branch, StaffAccount
from tests.helpers.clock import FixedClock
from tests.helpers.submissions import BRANCH_IDS, INACTIVE_BRANCH_ID

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 3, 1, 9, 0, tzinfo=UTC))


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemySubmissionUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemySubmissionUnitOfWork:
        return SqlAlchemySubmissionUnitOfWork()

    with factory() as uow:
        for branch_id in BRANCH_IDS:
            uow.repositories.branches.add(Branch(id=branch_id, name=f"Cabang {branch_id}"))
        uow.repositories.branches.add(
            Branch(id=INACTIVE_BRANCH_ID, name="Cabang Tutup", is_active=False)
        )
        uow.repositories.staff.add(
            StaffAccount(username="supervisor.pusat", role=ActorRole.GLOBAL_ADMIN)
        )
        uow.repositories.staff.add(
            StaffAccount(username="admin.cabang2", role=ActorRole.BRANCH_ADMIN, branch_id=2)
        )
        uow.commit()

    try:
        yield factory
    finally:
        shutdown()
