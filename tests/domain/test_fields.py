from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from account_opening.domain.errors import ValidationError
from account_opening.domain.fields import (
    FIELDS,
    OTHER_BANK_HOLDINGS,
    REQUIRED_FIELDS,
    Section,
    definition,
    normalize_record,
    resolve_key,
)
from account_opening.domain.model import CustomerType


def test_every_alias_resolves_to_exactly_one_field() -> None:
    seen: dict[str, str] = {}
    for field_definition in FIELDS:
        for key in field_definition.keys:
            assert key not in seen, f"{key} used by {seen.get(key)} and {field_definition.name}"
            seen[key] = field_definition.name


def test_required_fields_match_create_contract() -> None:
    assert set(REQUIRED_FIELDS) == {
        "branch_id",
        "name",
        "identity_number",
        "birth_date",
        "email",
        "phone",
    }


def test_normalize_record_resolves_aliases_in_priority_order() -> None:
    record = normalize_record(
        {
            "nama_lengkap": "Ani Setyawati",
            "nama": "",
            "nik": "3271010101010001",
            "identityNumber": "9999",
            "tanggal_lahir": "2000-01-01",
            "cabang_id": "3",
            "nominal_setoran": "Rp 500.000",
        }
    )

    assert record.get("name") == "Ani Setyawati"
    # "identityNumber" is listed before "nik"
    assert record.identity_number == "9999"
    assert record.birth_date == date(2000, 1, 1)
    assert record.branch_id == 3
    assert record.get("opening_deposit") == Decimal(500000)


def test_normalize_record_applies_defaults() -> None:
    record = normalize_record({"name": "Budi"})

    assert record.get("account_for_self") is True
    assert record.get("customer_type") is CustomerType.NEW
    assert record.get("has_card") is False
    assert not record.has_any(Section.EMERGENCY_CONTACT)
    assert "identity_number" in record.missing_required()


def test_normalize_record_reports_malformed_values_with_field_name() -> None:
    with pytest.raises(ValidationError, match="birth_date"):
        normalize_record({"birthDate": "kemarin"})


def test_collection_normalization_drops_incomplete_items() -> None:
    items = OTHER_BANK_HOLDINGS.normalize(
        [
            {"nama_bank": "BRI", "jenis_rekening": "Tabungan", "nomor_rekening": "123"},
            {"bankName": "BNI", "accountType": "Giro"},
            "not an item",
        ]
    )

    assert items == (
        {"bank_name": "BRI", "account_type": "Tabungan", "account_number": "123"},
    )


def test_collection_normalization_accepts_json_text() -> None:
    items = OTHER_BANK_HOLDINGS.normalize(
        '[{"bank_name": "Mandiri", "account_type": "Tabungan", "account_number": "9"}]'
    )

    assert items is not None
    assert items[0]["bank_name"] == "Mandiri"
    with pytest.raises(ValidationError):
        OTHER_BANK_HOLDINGS.normalize("{broken")


def test_resolve_key_covers_fields_and_collections() -> None:
    assert resolve_key("no_hp") is definition("phone")
    assert resolve_key("edd_bank_lain") is OTHER_BANK_HOLDINGS
    assert resolve_key("unknown_key") is None
