"""Declarative field catalogue for submission input.

Every logical field has one canonical name, an ordered list of input aliases,
the aggregate section and attribute it lives on, and its normalizer. The
catalogue is consumed twice: once at ingestion (``normalize_record``) to turn a
loosely keyed record into a ``CanonicalRecord``, and once by the post-approval
edit path to diff and apply incoming keys generically.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from account_opening.domain.errors import ValidationError
from account_opening.domain.model import CustomerType

from .normalization import (
    first_present,
    normalize_bool,
    normalize_currency,
    normalize_customer_type,
    normalize_date,
    normalize_datetime,
    normalize_int,
    normalize_status,
    normalize_text,
)

if TYPE_CHECKING:
    from datetime import date

    from account_opening.domain.model import SubmissionStatus

    from .normalization import Normalizer


class Section(StrEnum):
    SUBMISSION = "submission"
    PERSONAL = "personal"
    EMPLOYMENT = "employment"
    ACCOUNT = "account"
    EMERGENCY_CONTACT = "emergency_contact"
    BENEFICIAL_OWNER = "beneficial_owner"


@dataclass(frozen=True, slots=True)
class FieldDefinition:
    name: str
    section: Section
    attribute: str
    normalizer: Normalizer = normalize_text
    aliases: tuple[str, ...] = ()
    default: object = None
    required: bool = False
    editable: bool = True

    @property
    def keys(self) -> tuple[str, ...]:
        return (self.name, *self.aliases)

    def normalize(self, value: object) -> object:
        try:
            return self.normalizer(value)
        except ValueError as exc:
            raise ValidationError(f"{self.name}: {exc}") from exc


@dataclass(frozen=True, slots=True)
class CollectionDefinition:
    """A replaceable child collection; incomplete items are dropped."""

    name: str
    aliases: tuple[str, ...]
    item_fields: Mapping[str, tuple[str, ...]]
    required: tuple[str, ...]

    @property
    def keys(self) -> tuple[str, ...]:
        return (self.name, *self.aliases)

    def normalize(self, value: object) -> tuple[dict[str, str | None], ...] | None:
        if value is None:
            return None
        if isinstance(value, str):
            try:
                value = json.loads(value) if value.strip() else []
            except json.JSONDecodeError as exc:
                raise ValidationError(f"{self.name}: expected a list of items") from exc
        if not isinstance(value, list | tuple):
            raise ValidationError(f"{self.name}: expected a list of items")
        items: list[dict[str, str | None]] = []
        for raw_item in value:
            if not isinstance(raw_item, Mapping):
                continue
            item = {
                attribute: normalize_text(first_present(raw_item, keys))
                for attribute, keys in self.item_fields.items()
            }
            if all(item[attribute] for attribute in self.required):
                items.append(item)
        return tuple(items)


def _field(
    name: str,
    section: Section,
    *aliases: str,
    attribute: str | None = None,
    normalizer: Normalizer = normalize_text,
    default: object = None,
    required: bool = False,
    editable: bool = True,
) -> FieldDefinition:
    return FieldDefinition(
        name=name,
        section=section,
        attribute=attribute or name,
        normalizer=normalizer,
        aliases=aliases,
        default=default,
        required=required,
        editable=editable,
    )


S, P, E, A = Section.SUBMISSION, Section.PERSONAL, Section.EMPLOYMENT, Section.ACCOUNT
EC, BO = Section.EMERGENCY_CONTACT, Section.BENEFICIAL_OWNER

FIELDS: Final[tuple[FieldDefinition, ...]] = (
    # root metadata: read by create/import, never edited
    _field("branch_id", S, "cabang_id", "branchId", normalizer=normalize_int, required=True,
           editable=False),
    _field("status", S, normalizer=normalize_status, editable=False),
    _field("approved_by", S, "approvedBy", editable=False),
    _field("approved_at", S, "approvedAt", normalizer=normalize_datetime, editable=False),
    _field("rejected_by", S, "rejectedBy", editable=False),
    _field("rejected_at", S, "rejectedAt", normalizer=normalize_datetime, editable=False),
    # personal profile
    _field("name", P, "nama", "nama_lengkap", "fullName", "full_name", required=True),
    _field("alias", P, "nickname"),
    _field("identity_type", P, "jenis_id", "identityType"),
    _field("identity_number", P, "identityNumber", "no_id", "nik", required=True),
    _field("identity_valid_until", P, "berlaku_id", "identityValidUntil",
           normalizer=normalize_date),
    _field("birth_place", P, "tempat_lahir", "birthPlace"),
    _field("birth_date", P, "tanggal_lahir", "birthDate", normalizer=normalize_date,
           required=True),
    _field("identity_address", P, "alamat_id", "alamat", "identityAddress"),
    _field("street_address", P, "alamat_jalan", "streetAddress"),
    _field("province", P, "provinsi"),
    _field("city", P, "kota"),
    _field("district", P, "kecamatan"),
    _field("sub_district", P, "kelurahan", "subDistrict"),
    _field("postal_code", P, "kode_pos_id", "kode_pos", "postalCode"),
    _field("domicile_address", P, "alamat_now", "domicileAddress"),
    _field("home_status", P, "status_rumah", "homeStatus"),
    _field("email", P, required=True),
    _field("phone", P, "no_hp", "phoneNumber", "phone_number", required=True),
    _field("citizenship", P, "kewarganegaraan"),
    _field("gender", P, "jenis_kelamin"),
    _field("marital_status", P, "status_kawin", "status_pernikahan", "status_perkawinan",
           "maritalStatus"),
    _field("religion", P, "agama"),
    _field("education", P, "pendidikan"),
    _field("mother_name", P, "nama_ibu_kandung", "motherName"),
    _field("tax_id", P, "npwp", "taxId"),
    _field("account_for_self", P, "rekening_untuk_sendiri", "accountForSelf",
           normalizer=normalize_bool, default=True),
    _field("customer_type", P, "tipe_nasabah", "customerType",
           normalizer=normalize_customer_type, default=CustomerType.NEW),
    _field("legacy_account_number", P, "nomor_rekening_lama", "legacyAccountNumber"),
    # employment profile
    _field("occupation", E, "pekerjaan"),
    _field("employer_name", E, "nama_perusahaan", "tempat_bekerja", "employerName"),
    _field("employer_address", E, "alamat_perusahaan", "alamat_kantor", "employerAddress"),
    _field("employer_phone", E, "telepon_kantor", "no_telepon", "employerPhone"),
    _field("position", E, "jabatan"),
    _field("business_field", E, "bidang_usaha", "businessField"),
    _field("income_bracket", E, "gaji_per_bulan", "penghasilan", "incomeBracket"),
    _field("fund_source", E, "sumber_dana", "fundSource"),
    _field("monthly_transaction_volume", E, "rata_transaksi_per_bulan",
           "averageTransaction", normalizer=normalize_currency),
    # account configuration
    _field("product_type", A, "tabungan_tipe", "jenis_tabungan", "jenis_rekening",
           "productType"),
    _field("card_type", A, "atm_tipe", "jenis_kartu", "cardType"),
    _field("has_card", A, "hasCard", normalizer=normalize_bool, default=False),
    _field("opening_deposit", A, "nominal_setoran", "initialDeposit", "openingDeposit",
           normalizer=normalize_currency),
    _field("account_purpose", A, "tujuan_pembukaan", "tujuan_rekening", "accountPurpose"),
    # emergency contact
    _field("emergency_name", EC, "kontak_darurat_nama", "emergencyName", attribute="name"),
    _field("emergency_address", EC, "kontak_darurat_alamat", "emergencyAddress",
           attribute="address"),
    _field("emergency_phone", EC, "kontak_darurat_hp", "emergencyPhone", attribute="phone"),
    _field("emergency_relationship", EC, "kontak_darurat_hubungan", "emergencyRelationship",
           attribute="relationship"),
    # beneficial owner
    _field("bo_name", BO, "bo_nama", "boName", attribute="name"),
    _field("bo_address", BO, "bo_alamat", attribute="address"),
    _field("bo_birth_place", BO, "bo_tempat_lahir", attribute="birth_place"),
    _field("bo_birth_date", BO, "bo_tanggal_lahir", attribute="birth_date",
           normalizer=normalize_date),
    _field("bo_gender", BO, "bo_jenis_kelamin", attribute="gender"),
    _field("bo_citizenship", BO, "bo_kewarganegaraan", attribute="citizenship"),
    _field("bo_marital_status", BO, "bo_status_pernikahan", attribute="marital_status"),
    _field("bo_identity_type", BO, "bo_jenis_id", attribute="identity_type"),
    _field("bo_identity_number", BO, "bo_nomor_id", attribute="identity_number"),
    _field("bo_fund_source", BO, "bo_sumber_dana", attribute="fund_source"),
    _field("bo_relationship", BO, "bo_hubungan", attribute="relationship"),
    _field("bo_phone", BO, "bo_nomor_hp", attribute="phone"),
    _field("bo_occupation", BO, "bo_pekerjaan", attribute="occupation"),
    _field("bo_annual_income", BO, "bo_pendapatan_tahun", "bo_pendapatan_tahunan",
           attribute="annual_income"),
)

OTHER_BANK_HOLDINGS = CollectionDefinition(
    name="other_bank_holdings",
    aliases=("edd_bank_lain", "otherBankHoldings"),
    item_fields={
        "bank_name": ("bank_name", "nama_bank", "bankName"),
        "account_type": ("account_type", "jenis_rekening", "accountType"),
        "account_number": ("account_number", "nomor_rekening", "accountNumber"),
    },
    required=("bank_name", "account_type", "account_number"),
)

OTHER_OCCUPATIONS = CollectionDefinition(
    name="other_occupations",
    aliases=("edd_pekerjaan_lain", "otherOccupations"),
    item_fields={"description": ("description", "jenis_usaha", "occupation")},
    required=("description",),
)

COLLECTIONS: Final[tuple[CollectionDefinition, ...]] = (OTHER_BANK_HOLDINGS, OTHER_OCCUPATIONS)

REQUIRED_FIELDS: Final[tuple[str, ...]] = tuple(d.name for d in FIELDS if d.required)

_BY_NAME: Final[dict[str, FieldDefinition]] = {d.name: d for d in FIELDS}


def _build_key_index() -> dict[str, FieldDefinition | CollectionDefinition]:
    index: dict[str, FieldDefinition | CollectionDefinition] = {}
    for definition in (*FIELDS, *COLLECTIONS):
        for key in definition.keys:
            index.setdefault(key, definition)
    return index


_BY_KEY: Final[dict[str, FieldDefinition | CollectionDefinition]] = _build_key_index()


def definition(name: str) -> FieldDefinition:
    return _BY_NAME[name]


def resolve_key(key: str) -> FieldDefinition | CollectionDefinition | None:
    """Map any accepted input key (canonical name or alias) to its definition."""
    return _BY_KEY.get(key)


def section_fields(section: Section) -> tuple[FieldDefinition, ...]:
    return tuple(d for d in FIELDS if d.section is section)


@dataclass(frozen=True, slots=True)
class CanonicalRecord:
    """One input record after alias resolution and normalization."""

    values: Mapping[str, object]
    collections: Mapping[str, tuple[dict[str, str | None], ...] | None] = field(
        default_factory=dict
    )

    def get(self, name: str) -> object:
        return self.values.get(name)

    def section(self, section: Section) -> dict[str, object]:
        """Attribute -> value for every field of ``section``."""
        return {d.attribute: self.values.get(d.name) for d in section_fields(section)}

    def has_any(self, section: Section) -> bool:
        return any(
            self.values.get(d.name) is not None and d.default is None
            for d in section_fields(section)
        )

    def missing_required(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if self.values.get(name) is None]

    @property
    def identity_number(self) -> str | None:
        return self.values.get("identity_number")  # type: ignore[return-value]

    @property
    def branch_id(self) -> int | None:
        return self.values.get("branch_id")  # type: ignore[return-value]

    @property
    def status(self) -> SubmissionStatus | None:
        return self.values.get("status")  # type: ignore[return-value]

    @property
    def birth_date(self) -> date | None:
        return self.values.get("birth_date")  # type: ignore[return-value]


def normalize_record(raw: Mapping[str, object]) -> CanonicalRecord:
    """Resolve aliases (first non-empty wins), normalize values and apply defaults."""

    values: dict[str, object] = {}
    for field_definition in FIELDS:
        value = first_present(raw, field_definition.keys)
        normalized = None if value is None else field_definition.normalize(value)
        values[field_definition.name] = (
            field_definition.default if normalized is None else normalized
        )
    collections = {
        collection.name: collection.normalize(first_present(raw, collection.keys))
        for collection in COLLECTIONS
    }
    return CanonicalRecord(values=values, collections=collections)
