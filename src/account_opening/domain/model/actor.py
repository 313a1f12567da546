"""Acting principal supplied by the authentication layer."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import ActorRole


@dataclass(frozen=True, slots=True, kw_only=True)
class Actor:
    id: int | None
    role: ActorRole
    branch_id: int | None = None
    username: str | None = None

    @property
    def is_global(self) -> bool:
        return self.role is ActorRole.GLOBAL_ADMIN

    @property
    def label(self) -> str:
        """Name written into approval stamps and audit rows."""
        if self.username:
            return self.username
        return f"{self.role.value}#{self.id}" if self.id is not None else self.role.value
