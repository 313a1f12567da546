"""Branches and the staff accounts that act on their behalf."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import ActorRole


@dataclass(eq=False, kw_only=True)
class Branch:
    id: int | None = None
    name: str
    is_active: bool = True


@dataclass(eq=False, kw_only=True)
class StaffAccount:
    id: int | None = None
    username: str
    role: ActorRole
    branch_id: int | None = None
