"""SQLAlchemy mapping metadata for the submission domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers, relationship

from account_opening.domain.model import (
    AccountConfig,
    ActivityAction,
    ActivityLogEntry,
    ActorRole,
    AuditEntry,
    BeneficialOwner,
    Branch,
    CustomerType,
    EmergencyContact,
    EmploymentProfile,
    OtherBankHolding,
    OtherOccupation,
    PersonalProfile,
    StaffAccount,
    Submission,
    SubmissionStatus,
)

log = logging.getLogger(__name__)

# NUMERIC(15, 2) is the storage precision limit the currency normalizer caps to.
Money = Numeric(15, 2)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _submission_fk(*, primary_key: bool = False) -> Column[int]:
    return Column(
        "submission_id",
        Integer,
        ForeignKey("submission.id", ondelete="CASCADE"),
        primary_key=primary_key,
        nullable=False,
        index=not primary_key,
    )


# Organisation ----------------------------------------------------------------

branch_table = Table(
    "branch",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(120), nullable=False, unique=True),
    Column("is_active", Boolean, nullable=False, default=True),
)

staff_account_table = Table(
    "staff_account",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(80), nullable=False, unique=True),
    Column("role", Enum(ActorRole, native_enum=False, length=20), nullable=False),
    Column("branch_id", Integer, ForeignKey("branch.id"), nullable=True),
)

# Submission aggregate ----------------------------------------------------------

submission_table = Table(
    "submission",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("branch_id", Integer, ForeignKey("branch.id"), nullable=False, index=True),
    Column("reference_code", String(40), nullable=False, index=True),
    Column(
        "status",
        Enum(SubmissionStatus, native_enum=False, length=20),
        nullable=False,
        default=SubmissionStatus.PENDING,
        index=True,
    ),
    Column("created_at", UTCDateTime(), nullable=False, index=True),
    Column("created_by_role", Enum(ActorRole, native_enum=False, length=20), nullable=True),
    Column("approved_by", String(120), nullable=True),
    Column("approved_at", UTCDateTime(), nullable=True),
    Column("rejected_by", String(120), nullable=True),
    Column("rejected_at", UTCDateTime(), nullable=True),
    Column("original_approved_by", String(120), nullable=True),
    Column("original_approved_at", UTCDateTime(), nullable=True),
    Column("edit_count", Integer, nullable=False, default=0),
    Column("last_edited_by", String(120), nullable=True),
    Column("last_edited_at", UTCDateTime(), nullable=True),
)

personal_profile_table = Table(
    "personal_profile",
    mapper_registry.metadata,
    _submission_fk(primary_key=True),
    Column("name", String(200), nullable=False),
    Column("alias", String(200), nullable=True),
    Column("identity_type", String(40), nullable=True),
    Column("identity_number", String(40), nullable=False),
    Column("identity_valid_until", Date, nullable=True),
    Column("birth_place", String(120), nullable=True),
    Column("birth_date", Date, nullable=False),
    Column("identity_address", Text, nullable=True),
    Column("street_address", Text, nullable=True),
    Column("province", String(120), nullable=True),
    Column("city", String(120), nullable=True),
    Column("district", String(120), nullable=True),
    Column("sub_district", String(120), nullable=True),
    Column("postal_code", String(10), nullable=True),
    Column("domicile_address", Text, nullable=True),
    Column("home_status", String(60), nullable=True),
    Column("email", String(200), nullable=False),
    Column("phone", String(40), nullable=False),
    Column("citizenship", String(60), nullable=True),
    Column("gender", String(20), nullable=True),
    Column("marital_status", String(40), nullable=True),
    Column("religion", String(40), nullable=True),
    Column("education", String(60), nullable=True),
    Column("mother_name", String(200), nullable=True),
    Column("tax_id", String(40), nullable=True),
    Column("account_for_self", Boolean, nullable=False, default=True),
    Column(
        "customer_type",
        Enum(CustomerType, native_enum=False, length=20),
        nullable=False,
        default=CustomerType.NEW,
    ),
    Column("legacy_account_number", String(40), nullable=True),
    Index("ix_personal_profile_identity_number", "identity_number"),
)

employment_profile_table = Table(
    "employment_profile",
    mapper_registry.metadata,
    _submission_fk(primary_key=True),
    Column("occupation", String(120), nullable=True),
    Column("employer_name", String(200), nullable=True),
    Column("employer_address", Text, nullable=True),
    Column("employer_phone", String(40), nullable=True),
    Column("position", String(120), nullable=True),
    Column("business_field", String(120), nullable=True),
    Column("income_bracket", String(60), nullable=True),
    Column("fund_source", String(120), nullable=True),
    Column("monthly_transaction_volume", Money, nullable=True),
)

account_config_table = Table(
    "account_config",
    mapper_registry.metadata,
    _submission_fk(primary_key=True),
    Column("product_type", String(60), nullable=True),
    Column("card_type", String(60), nullable=True),
    Column("has_card", Boolean, nullable=False, default=False),
    Column("opening_deposit", Money, nullable=True),
    Column("account_purpose", String(200), nullable=True),
)

emergency_contact_table = Table(
    "emergency_contact",
    mapper_registry.metadata,
    _submission_fk(primary_key=True),
    Column("name", String(200), nullable=True),
    Column("address", Text, nullable=True),
    Column("phone", String(40), nullable=True),
    Column("relationship", String(60), nullable=True),
)

beneficial_owner_table = Table(
    "beneficial_owner",
    mapper_registry.metadata,
    _submission_fk(primary_key=True),
    Column("name", String(200), nullable=False),
    Column("address", Text, nullable=True),
    Column("birth_place", String(120), nullable=True),
    Column("birth_date", Date, nullable=True),
    Column("gender", String(20), nullable=True),
    Column("citizenship", String(60), nullable=True),
    Column("marital_status", String(40), nullable=True),
    Column("identity_type", String(40), nullable=True),
    Column("identity_number", String(40), nullable=True),
    Column("fund_source", String(120), nullable=True),
    Column("relationship", String(60), nullable=True),
    Column("phone", String(40), nullable=True),
    Column("occupation", String(120), nullable=True),
    Column("annual_income", String(60), nullable=True),
)

other_bank_holding_table = Table(
    "other_bank_holding",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _submission_fk(),
    Column("bank_name", String(120), nullable=False),
    Column("account_type", String(60), nullable=False),
    Column("account_number", String(60), nullable=False),
)

other_occupation_table = Table(
    "other_occupation",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    _submission_fk(),
    Column("description", String(200), nullable=False),
)

# Append-only logs --------------------------------------------------------------

audit_entry_table = Table(
    "audit_entry",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("submission_id", Integer, ForeignKey("submission.id"), nullable=False, index=True),
    Column("field", String(80), key="field_name", nullable=False),
    Column("old_value", Text, nullable=True),
    Column("new_value", Text, nullable=True),
    Column("reason", Text, nullable=True),
    Column("actor", String(120), nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
)

activity_log_table = Table(
    "activity_log",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("action", Enum(ActivityAction, native_enum=False, length=40), nullable=False),
    Column("description", Text, nullable=False),
    Column("actor_id", Integer, nullable=True),
    Column("actor_label", String(120), nullable=True),
    Column("branch_id", Integer, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False, index=True),
)

import_progress_table = Table(
    "import_progress",
    mapper_registry.metadata,
    Column("key", String(120), primary_key=True),
    Column("progress", Integer, nullable=False),
    Column("message", Text, nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
    Column("expires_at", UTCDateTime(), nullable=False, index=True),
)

# Children first, root last: the order bulk deletes must follow.
SUBMISSION_CHILD_TABLES: tuple[Table, ...] = (
    audit_entry_table,
    other_occupation_table,
    other_bank_holding_table,
    beneficial_owner_table,
    emergency_contact_table,
    account_config_table,
    employment_profile_table,
    personal_profile_table,
)


def _one_to_one[T](cls: type[T]) -> orm.RelationshipProperty[T]:
    return relationship(
        cls,
        uselist=False,
        lazy="selectin",
        cascade="all, delete-orphan",
        single_parent=True,
    )


@cache
def start_mappers() -> orm.registry:
    """Configure imperative mappings (idempotent)."""

    mapper_registry.map_imperatively(Branch, branch_table)
    mapper_registry.map_imperatively(StaffAccount, staff_account_table)

    mapper_registry.map_imperatively(PersonalProfile, personal_profile_table)
    mapper_registry.map_imperatively(EmploymentProfile, employment_profile_table)
    mapper_registry.map_imperatively(AccountConfig, account_config_table)
    mapper_registry.map_imperatively(EmergencyContact, emergency_contact_table)
    mapper_registry.map_imperatively(BeneficialOwner, beneficial_owner_table)
    mapper_registry.map_imperatively(OtherBankHolding, other_bank_holding_table)
    mapper_registry.map_imperatively(OtherOccupation, other_occupation_table)

    mapper_registry.map_imperatively(
        Submission,
        submission_table,
        properties={
            "personal": _one_to_one(PersonalProfile),
            "employment": _one_to_one(EmploymentProfile),
            "account": _one_to_one(AccountConfig),
            "emergency_contact": _one_to_one(EmergencyContact),
            "beneficial_owner": _one_to_one(BeneficialOwner),
            "other_bank_holdings": relationship(
                OtherBankHolding,
                lazy="selectin",
                cascade="all, delete-orphan",
                order_by=other_bank_holding_table.c.id,
            ),
            "other_occupations": relationship(
                OtherOccupation,
                lazy="selectin",
                cascade="all, delete-orphan",
                order_by=other_occupation_table.c.id,
            ),
        },
    )

    mapper_registry.map_imperatively(AuditEntry, audit_entry_table)
    mapper_registry.map_imperatively(ActivityLogEntry, activity_log_table)

    configure_mappers()
    log.debug("Submission mappers configured")
    return mapper_registry

