"""Notifier used when no gateway is configured: it only logs the trigger."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from account_opening.domain.model import NotificationKind

log = getLogger(__name__)


@dataclass(slots=True)
class LoggingNotifier:
    def notify(
        self,
        recipient: str,
        kind: NotificationKind,
        payload: Mapping[str, object],
    ) -> None:
        log.info(
            f"Notification {kind} for {recipient} "
            f"(reference={payload.get('reference_code')}); no gateway configured"
        )
