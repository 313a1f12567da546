from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal

import pytest

from account_opening.domain.model import CustomerType, SubmissionStatus
from account_opening.domain.normalization import (
    CURRENCY_CAP,
    first_present,
    normalize_bool,
    normalize_currency,
    normalize_customer_type,
    normalize_date,
    normalize_datetime,
    normalize_int,
    normalize_status,
    normalize_text,
    render_value,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Rp 1.500.000", Decimal(1500000)),
        ("IDR 2,000", Decimal(2000)),
        ("250000", Decimal(250000)),
        (750, Decimal(750)),
        ("lima juta", None),
        ("", None),
        (None, None),
        ("-5000", None),
    ],
)
def test_normalize_currency_strips_formatting(raw: object, expected: Decimal | None) -> None:
    assert normalize_currency(raw) == expected


def test_normalize_currency_caps_at_storage_limit() -> None:
    assert normalize_currency("99999999999999999") == CURRENCY_CAP


@pytest.mark.parametrize(
    "raw", ["Rp 5.000²", "٤٥٠", float("nan"), float("inf"), Decimal("NaN")]
)
def test_normalize_currency_rejects_non_decimal_numbers(raw: object) -> None:
    assert normalize_currency(raw) is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(True, True), ("true", True), ("1", True), ("TRUE ", True), ("false", False),
     ("ya", False), (None, False), (1, False)],
)
def test_normalize_bool_accepts_literal_true_strings(raw: object, expected: bool) -> None:
    assert normalize_bool(raw) is expected


def test_normalize_date_accepts_prefix_of_timestamp() -> None:
    assert normalize_date("2000-01-01T00:00:00Z") == date(2000, 1, 1)
    assert normalize_date(datetime(2000, 1, 1, 8, tzinfo=UTC)) == date(2000, 1, 1)
    assert normalize_date("  ") is None


def test_normalize_date_rejects_garbage() -> None:
    with pytest.raises(ValueError, match="YYYY-MM-DD"):
        normalize_date("01/02/2000")


def test_normalize_datetime_assumes_utc_for_naive_values() -> None:
    assert normalize_datetime("2025-01-02T03:04:05") == datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC)
    assert normalize_datetime("2025-01-02T10:00:00+07:00") == datetime(
        2025, 1, 2, 3, 0, tzinfo=UTC
    )
    assert normalize_datetime("2025-01-02T03:00:00Z") == datetime(2025, 1, 2, 3, 0, tzinfo=UTC)


def test_normalize_int_rejects_booleans_and_text() -> None:
    assert normalize_int(" 5 ") == 5
    with pytest.raises(ValueError):
        normalize_int(True)
    with pytest.raises(ValueError):
        normalize_int("lima")


def test_normalize_customer_type_maps_local_terms() -> None:
    assert normalize_customer_type("Baru") is CustomerType.NEW
    assert normalize_customer_type("lama") is CustomerType.EXISTING
    with pytest.raises(ValueError):
        normalize_customer_type("vip")


def test_normalize_status_is_case_insensitive() -> None:
    assert normalize_status("Approved") is SubmissionStatus.APPROVED
    assert normalize_status(None) is None
    with pytest.raises(ValueError):
        normalize_status("archived")


def test_first_present_skips_blank_aliases() -> None:
    raw = {"nama": "  ", "fullName": "Budi", "name": None}

    assert first_present(raw, ("name", "nama", "fullName")) == "Budi"
    assert first_present(raw, ("name", "nama")) is None


def test_normalize_text_blank_means_no_value() -> None:
    assert normalize_text("   ") is None
    assert normalize_text(SubmissionStatus.PENDING) == "pending"
    assert normalize_text(42) == "42"


def test_render_value_is_stable_for_comparison() -> None:
    assert render_value(Decimal("1500000.00")) == "1500000"
    assert render_value(Decimal(1500000)) == "1500000"
    assert render_value(True) == "true"
    assert render_value(date(2000, 1, 1)) == "2000-01-01"
    assert render_value(CustomerType.EXISTING) == "existing"
    assert render_value(None) is None
