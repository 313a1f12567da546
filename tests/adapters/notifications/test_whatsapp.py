from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import parse_qs

import httpx
import pytest

from account_opening.adapters.http_resilience import ResilientClient
from account_opening.adapters.notifications import (
    LoggingNotifier,
    WhatsAppNotifier,
    format_phone_number,
    render_message,
)
from account_opening.config import ResilienceConfig, WhatsAppConfig
from account_opening.domain.model import NotificationKind
from account_opening.domain.ports import NotificationError

if TYPE_CHECKING:
    from collections.abc import Callable


def _config() -> WhatsAppConfig:
    return WhatsAppConfig(
        token="secret-token",
        resilience=ResilienceConfig(
            name="fonnte",
            base_url="https://fonnte.test",
            default_headers={"Authorization": "secret-token"},
        ),
    )


def _notifier(handler: Callable[[httpx.Request], httpx.Response]) -> WhatsAppNotifier:
    return WhatsAppNotifier(
        config=_config(),
        client_factory=lambda cfg: ResilientClient(cfg, transport=httpx.MockTransport(handler)),
    )


def test_notify_posts_form_to_gateway() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"status": True, "id": ["80367170"], "process": "pending"})

    _notifier(handler).notify(
        "0812-3456-789", NotificationKind.APPROVED, {"name": "Ani", "reference_code": "REG-1"}
    )

    (request,) = requests
    assert request.method == "POST"
    assert request.url.path == "/send"
    assert request.headers["Authorization"] == "secret-token"
    form = parse_qs(request.content.decode())
    assert form["target"] == ["628123456789"]
    assert form["countryCode"] == ["62"]
    assert form["message"][0].startswith("Halo Ani!")


def test_gateway_refusal_raises_notification_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": False, "reason": "invalid token"})

    with pytest.raises(NotificationError, match="invalid token"):
        _notifier(handler).notify("628123", NotificationKind.REJECTED, {"name": "Ani"})


def test_unreadable_response_raises_notification_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    with pytest.raises(NotificationError):
        _notifier(handler).notify("628123", NotificationKind.REJECTED, {"name": "Ani"})


def test_client_error_status_propagates() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"status": False})

    with pytest.raises(httpx.HTTPStatusError):
        _notifier(handler).notify("628123", NotificationKind.APPROVED, {"name": "Ani"})


def test_missing_recipient_is_skipped(caplog: pytest.LogCaptureFixture) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with caplog.at_level(logging.WARNING):
        _notifier(handler).notify("  ", NotificationKind.APPROVED, {"name": "Ani"})

    assert "recipient number is missing" in caplog.text


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("081234567890", "6281234567890"),
        ("+62 812-3456-7890", "6281234567890"),
        ("6281234567890", "6281234567890"),
    ],
)
def test_format_phone_number(raw: str, expected: str) -> None:
    assert format_phone_number(raw) == expected


def test_render_message_prefers_custom_text() -> None:
    assert render_message(NotificationKind.REJECTED, {"message": "Dokumen kurang"}) == (
        "Dokumen kurang"
    )
    assert render_message(NotificationKind.REJECTED, {"message": "  "}).startswith(
        "Halo Nasabah,"
    )


def test_logging_notifier_only_logs(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO):
        LoggingNotifier().notify("0812", NotificationKind.APPROVED, {"reference_code": "REG-9"})

    assert "reference=REG-9" in caplog.text
