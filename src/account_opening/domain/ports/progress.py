"""TTL-bound key/value ledger for long-running batch progress."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import timedelta

    from account_opening.domain.reconciliation.contracts import ProgressSnapshot


@runtime_checkable
class ProgressLedger(Protocol):
    def set(self, key: str, value: ProgressSnapshot, ttl: timedelta) -> None: ...

    def get(self, key: str) -> ProgressSnapshot | None:
        """Latest snapshot for ``key``, or ``None`` once it expired or never existed."""
        ...
