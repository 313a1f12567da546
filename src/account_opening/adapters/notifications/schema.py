"""Pydantic models for the Fonnte gateway responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FonnteBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SendResponse(FonnteBaseModel):
    status: bool
    detail: str | None = None
    reason: str | None = None
    message_ids: list[str | int] = Field(default_factory=list, alias="id")
    process: str | None = None

    @property
    def failure_reason(self) -> str:
        return self.reason or self.detail or "unknown gateway error"
