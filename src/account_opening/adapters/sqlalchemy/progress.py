"""Progress ledger stored in the relational database.

Every process that shares the database sees the same snapshots, so a batch
started on one instance can be polled from another. Expired rows are removed
lazily on read and on write.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select

from account_opening.adapters.sqlalchemy.mappings import import_progress_table
from account_opening.domain.model import utc_now
from account_opening.domain.reconciliation.contracts import ProgressSnapshot

if TYPE_CHECKING:
    from datetime import timedelta

    from sqlalchemy.engine import Engine

    from account_opening.domain.model import Clock


@dataclass(slots=True)
class SqlAlchemyProgressLedger:
    engine: Engine
    clock: Clock = field(default=utc_now)

    def set(self, key: str, value: ProgressSnapshot, ttl: timedelta) -> None:
        now = self.clock()
        with self.engine.begin() as connection:
            connection.execute(
                delete(import_progress_table).where(
                    (import_progress_table.c.key == key)
                    | (import_progress_table.c.expires_at <= now)
                )
            )
            connection.execute(
                insert(import_progress_table).values(
                    key=key,
                    progress=value.progress,
                    message=value.message,
                    updated_at=value.timestamp,
                    expires_at=now + ttl,
                )
            )

    def get(self, key: str) -> ProgressSnapshot | None:
        now = self.clock()
        with self.engine.begin() as connection:
            row = connection.execute(
                select(
                    import_progress_table.c.progress,
                    import_progress_table.c.message,
                    import_progress_table.c.updated_at,
                    import_progress_table.c.expires_at,
                ).where(import_progress_table.c.key == key)
            ).one_or_none()
            if row is None:
                return None
            if row.expires_at <= now:
                connection.execute(
                    delete(import_progress_table).where(import_progress_table.c.key == key)
                )
                return None
        return ProgressSnapshot(
            progress=row.progress, message=row.message, timestamp=row.updated_at
        )
