"""Error taxonomy shared by the writer, audit trail and batch import.

Every error carries a stable ``kind`` so outer layers can report the failure
class separately from its human-readable message.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

GENERIC_STORE_MESSAGE = "The submission store rejected the operation"


class AccountOpeningError(Exception):
    """Base class for all expected failures of the core."""

    kind: ClassVar[str] = "error"


class ValidationError(AccountOpeningError):
    """Missing or malformed required input."""

    kind = "validation"


class DuplicateIdentityError(AccountOpeningError):
    """An active submission with the same identity number already exists."""

    kind = "duplicate_identity"


class InvalidStateError(AccountOpeningError):
    """Operation is not allowed for the submission's current lifecycle state."""

    kind = "invalid_state"


class AccessDeniedError(AccountOpeningError):
    """Cross-branch access or a role-hierarchy violation."""

    kind = "access_denied"


class NotFoundError(AccountOpeningError):
    kind = "not_found"


class NoChangeError(AccountOpeningError):
    """Edit request whose normalized values all equal the stored ones."""

    kind = "no_change"


class ConflictBlockedError(AccountOpeningError):
    """Batch record collides with an active (pending or approved) submission."""

    kind = "conflict_blocked"


class PersistenceError(AccountOpeningError):
    """Unexpected store failure; the surrounding transaction has been rolled back."""

    kind = "persistence"

    def __init__(self, message: str = GENERIC_STORE_MESSAGE, *, detail: str | None = None) -> None:
        super().__init__(message)
        self.detail = detail


@dataclass(frozen=True, slots=True)
class ErrorReport:
    kind: str
    message: str
    detail: str | None = None

    def as_dict(self) -> dict[str, str]:
        payload = {"kind": self.kind, "message": self.message}
        if self.detail is not None:
            payload["detail"] = self.detail
        return payload


def describe_error(exc: BaseException, *, debug: bool = False) -> ErrorReport:
    """Turn ``exc`` into a structured report.

    Store-level detail is only included when ``debug`` is set; unexpected
    exceptions are reported as ``internal`` without their message otherwise.
    """

    if isinstance(exc, PersistenceError):
        return ErrorReport(kind=exc.kind, message=str(exc), detail=exc.detail if debug else None)
    if isinstance(exc, AccountOpeningError):
        return ErrorReport(kind=exc.kind, message=str(exc))
    return ErrorReport(
        kind="internal",
        message="Unexpected internal error",
        detail=f"{type(exc).__name__}: {exc}" if debug else None,
    )
