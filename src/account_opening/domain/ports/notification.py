"""Outbound notification trigger."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from account_opening.domain.model import NotificationKind


class NotificationError(RuntimeError):
    """Raised by notifier adapters when the gateway refuses a message."""


@runtime_checkable
class Notifier(Protocol):
    def notify(
        self,
        recipient: str,
        kind: NotificationKind,
        payload: Mapping[str, object],
    ) -> None: ...
