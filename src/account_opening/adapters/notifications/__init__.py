"""Outbound notification adapters."""

from __future__ import annotations

from .log import LoggingNotifier
from .schema import SendResponse
from .whatsapp import (
    DEFAULT_TEMPLATES,
    WhatsAppNotifier,
    format_phone_number,
    render_message,
)

__all__ = [
    "DEFAULT_TEMPLATES",
    "LoggingNotifier",
    "SendResponse",
    "WhatsAppNotifier",
    "format_phone_number",
    "render_message",
]
