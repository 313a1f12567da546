"""Batch import defaults."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .env import env_int

DEFAULT_PROGRESS_TTL_SECONDS = 30 * 60
DEFAULT_PROGRESS_GRACE_SECONDS = 60
DEFAULT_PROGRESS_INTERVAL = 1


@dataclass(frozen=True, slots=True)
class ImportConfig:
    progress_ttl_seconds: int = DEFAULT_PROGRESS_TTL_SECONDS
    progress_grace_seconds: int = DEFAULT_PROGRESS_GRACE_SECONDS
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL

    @property
    def progress_ttl(self) -> timedelta:
        return timedelta(seconds=self.progress_ttl_seconds)

    @property
    def progress_grace(self) -> timedelta:
        return timedelta(seconds=self.progress_grace_seconds)


def get_import_config() -> ImportConfig:
    return ImportConfig(
        progress_ttl_seconds=env_int("IMPORT_PROGRESS_TTL_SECONDS", DEFAULT_PROGRESS_TTL_SECONDS),
        progress_grace_seconds=env_int(
            "IMPORT_PROGRESS_GRACE_SECONDS", DEFAULT_PROGRESS_GRACE_SECONDS
        ),
        progress_interval=env_int(
            "IMPORT_PROGRESS_INTERVAL", DEFAULT_PROGRESS_INTERVAL, minimum=1
        ),
    )
