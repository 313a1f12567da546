"""Value normalizers applied to loosely shaped input.

Each normalizer accepts whatever a form, spreadsheet row or backup file
produced and returns the canonical Python value, ``None`` for "no value", or
raises ``ValueError`` for input that is present but malformed.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import TYPE_CHECKING, Final

from account_opening.domain.model import CustomerType, SubmissionStatus

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

type Normalizer = Callable[[object], object]

# Storage precision limit for money columns (NUMERIC(15, 2)).
CURRENCY_CAP: Final[Decimal] = Decimal("9999999999999")

_CURRENCY_NOISE = re.compile(r"(?i)rp|idr|\s|[.,']")
_ASCII_DIGITS = re.compile(r"[0-9]+")
_TRUE_STRINGS: Final[frozenset[str]] = frozenset({"true", "1"})
_CUSTOMER_TYPES: Final[dict[str, CustomerType]] = {
    "new": CustomerType.NEW,
    "baru": CustomerType.NEW,
    "existing": CustomerType.EXISTING,
    "lama": CustomerType.EXISTING,
}


def is_empty(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def first_present(raw: Mapping[str, object], aliases: Sequence[str]) -> object:
    """Return the first non-empty value among ``aliases`` in priority order."""

    for alias in aliases:
        value = raw.get(alias)
        if not is_empty(value):
            return value
    return None


def normalize_text(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, Enum):
        value = value.value
    text = value.strip() if isinstance(value, str) else str(value).strip()
    return text or None


def normalize_currency(value: object) -> Decimal | None:
    """Strip currency formatting and cap at the storage limit.

    Non-numeric input yields ``None`` rather than an error.
    """

    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, Decimal | int):
            amount = Decimal(value)
        elif isinstance(value, float):
            amount = Decimal(str(value))
        else:
            cleaned = _CURRENCY_NOISE.sub("", str(value))
            # str.isdigit() also accepts superscripts and other Unicode digits
            if _ASCII_DIGITS.fullmatch(cleaned) is None:
                return None
            amount = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount < 0:
        return None
    return min(amount, CURRENCY_CAP)


def normalize_date(value: object) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise ValueError(f"invalid date {text!r}, expected YYYY-MM-DD") from exc


def normalize_datetime(value: object) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"invalid timestamp {text!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def normalize_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def normalize_int(value: object) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("expected an integer, got a boolean")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError as exc:
        raise ValueError(f"expected an integer, got {text!r}") from exc


def normalize_customer_type(value: object) -> CustomerType | None:
    text = normalize_text(value)
    if text is None:
        return None
    try:
        return _CUSTOMER_TYPES[text.lower()]
    except KeyError as exc:
        raise ValueError(f"unknown customer type {text!r}") from exc


def normalize_status(value: object) -> SubmissionStatus | None:
    text = normalize_text(value)
    if text is None:
        return None
    try:
        return SubmissionStatus(text.lower())
    except ValueError as exc:
        raise ValueError(f"unknown status {text!r}") from exc


def render_value(value: object) -> str | None:
    """Text form used to compare stored and incoming values and to fill audit rows."""

    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)
