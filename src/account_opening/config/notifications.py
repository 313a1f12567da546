"""WhatsApp gateway (Fonnte) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

FONNTE_BASE_URL = "https://api.fonnte.com"
FONNTE_TIMEOUT_SECONDS = 10.0
DEFAULT_COUNTRY_CODE = "62"


@dataclass(frozen=True)
class WhatsAppConfig:
    """Holds the gateway token and HTTP behaviour for outgoing messages."""

    token: str
    resilience: ResilienceConfig
    country_code: str = DEFAULT_COUNTRY_CODE


def is_whatsapp_configured() -> bool:
    return optional_env_var("FONNTE_TOKEN") is not None


def get_whatsapp_config(*, resilience: ResilienceConfig | None = None) -> WhatsAppConfig:
    values = require_env_vars(("FONNTE_TOKEN",))
    base_url = optional_env_var("FONNTE_BASE_URL") or FONNTE_BASE_URL
    return WhatsAppConfig(
        token=values["FONNTE_TOKEN"],
        resilience=resilience
        or ResilienceConfig(
            name="fonnte",
            base_url=base_url,
            timeout_seconds=FONNTE_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            default_headers={"Authorization": values["FONNTE_TOKEN"]},
        ),
    )
