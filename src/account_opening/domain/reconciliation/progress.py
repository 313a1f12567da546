"""Process-local progress ledger.

Only visible inside the process that runs the batch; deployments with more
than one instance use the SQL-backed ledger instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock
from typing import TYPE_CHECKING

from account_opening.domain.model import utc_now

if TYPE_CHECKING:
    from datetime import datetime, timedelta

    from account_opening.domain.model import Clock

    from .contracts import ProgressSnapshot


@dataclass(slots=True)
class InMemoryProgressLedger:
    clock: Clock = field(default=utc_now)
    _entries: dict[str, tuple[ProgressSnapshot, datetime]] = field(default_factory=dict)
    _lock: Lock = field(default_factory=Lock)

    def set(self, key: str, value: ProgressSnapshot, ttl: timedelta) -> None:
        now = self.clock()
        with self._lock:
            self._purge(now)
            self._entries[key] = (value, now + ttl)

    def get(self, key: str) -> ProgressSnapshot | None:
        now = self.clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            snapshot, expires_at = entry
            if expires_at <= now:
                del self._entries[key]
                return None
            return snapshot

    def __len__(self) -> int:
        return len(self._entries)

    def _purge(self, now: datetime) -> None:
        expired = [key for key, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
