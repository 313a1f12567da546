"""Deployment mode settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import optional_env_var

DEVELOPMENT: Final[str] = "development"
PRODUCTION: Final[str] = "production"


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    environment: str = PRODUCTION

    @property
    def is_development(self) -> bool:
        """Development mode exposes underlying store errors to callers."""
        return self.environment == DEVELOPMENT


def get_runtime_config() -> RuntimeConfig:
    environment = optional_env_var("APP_ENV")
    return RuntimeConfig(environment=environment.lower() if environment else PRODUCTION)
