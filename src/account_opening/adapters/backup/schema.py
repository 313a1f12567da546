"""Pydantic models for the JSON backup file."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PayloadValidationError

from account_opening.domain.errors import ValidationError

BACKUP_VERSION = "1.0"


class BackupBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class BackupMetadata(BackupBaseModel):
    version: str = BACKUP_VERSION
    exported_at: datetime = Field(alias="exportedAt")
    exported_by: str | None = Field(default=None, alias="exportedBy")
    total_records: int = Field(alias="totalRecords")


class BackupEnvelope(BackupBaseModel):
    metadata: BackupMetadata | None = None
    data: list[dict[str, Any]]


_BACKUP_ADAPTER: TypeAdapter[BackupEnvelope | list[dict[str, Any]]] = TypeAdapter(
    BackupEnvelope | list[dict[str, Any]]
)


def parse_backup(text: str | bytes) -> list[dict[str, Any]]:
    """Records of a backup file, given either as ``{metadata, data}`` or a bare array."""

    try:
        parsed = _BACKUP_ADAPTER.validate_json(text)
    except PayloadValidationError as exc:
        raise ValidationError(f"Unreadable backup file: {exc.error_count()} problem(s)") from exc
    if isinstance(parsed, BackupEnvelope):
        return parsed.data
    return parsed
