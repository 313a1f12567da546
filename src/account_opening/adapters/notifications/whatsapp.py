"""WhatsApp notifications through the Fonnte gateway."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError as PayloadValidationError

from account_opening.adapters.http_resilience import ResilientClient
from account_opening.config import WhatsAppConfig, get_whatsapp_config
from account_opening.domain.model import NotificationKind
from account_opening.domain.ports import NotificationError, Notifier

from .schema import SendResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from account_opening.config import ResilienceConfig

log = getLogger(__name__)

SEND_PATH: Final[str] = "/send"

DEFAULT_TEMPLATES: Final[dict[NotificationKind, str]] = {
    NotificationKind.APPROVED: (
        "Halo {name}! 🎉 Permohonan rekening Anda telah disetujui. "
        "Silakan kunjungi kantor cabang untuk aktivasi."
    ),
    NotificationKind.REJECTED: (
        "Halo {name}, permohonan rekening Anda belum disetujui. "
        "Silakan hubungi cabang terdekat untuk info lebih lanjut."
    ),
}


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def format_phone_number(phone: str, *, country_code: str = "62") -> str:
    """Rewrite local numbers (``08...``) and ``+62...`` into the gateway's ``62...`` form."""

    digits = "".join(ch for ch in phone.strip() if ch.isdigit() or ch == "+")
    if digits.startswith("+"):
        digits = digits[1:]
    if digits.startswith("0"):
        digits = country_code + digits[1:]
    return digits


def render_message(
    kind: NotificationKind,
    payload: Mapping[str, object],
    templates: Mapping[NotificationKind, str] = DEFAULT_TEMPLATES,
) -> str:
    custom = payload.get("message")
    if isinstance(custom, str) and custom.strip():
        return custom
    return templates[kind].format(name=payload.get("name") or "Nasabah")


@dataclass(slots=True)
class WhatsAppNotifier:
    config: WhatsAppConfig = field(default_factory=get_whatsapp_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    templates: Mapping[NotificationKind, str] = field(default_factory=lambda: DEFAULT_TEMPLATES)

    def notify(
        self,
        recipient: str,
        kind: NotificationKind,
        payload: Mapping[str, object],
    ) -> None:
        if not recipient or not recipient.strip():
            log.warning(f"Skipping {kind} WhatsApp message: recipient number is missing")
            return
        target = format_phone_number(recipient, country_code=self.config.country_code)
        message = render_message(kind, payload, self.templates)
        response = asyncio.run(self._send(target, message))
        log.info(f"Sent {kind} WhatsApp message to {target} ({response.process or 'queued'})")

    async def _send(self, target: str, message: str) -> SendResponse:
        async with self.client_factory(self.config.resilience) as client:
            response = await client.post(
                SEND_PATH,
                data={
                    "target": target,
                    "message": message,
                    "countryCode": self.config.country_code,
                },
            )
        response.raise_for_status()
        try:
            parsed = SendResponse.model_validate(response.json())
        except (ValueError, PayloadValidationError) as exc:
            raise NotificationError("Unexpected Fonnte response payload") from exc
        if not parsed.status:
            log.error(f"Fonnte refused message to {target}: {parsed.failure_reason}")
            raise NotificationError(parsed.failure_reason)
        return parsed


if TYPE_CHECKING:
    _notifier_check: Notifier = WhatsAppNotifier()
