"""The submission aggregate.

A submission is one customer's account-opening request. It owns three
mandatory 1:1 sections (personal, employment, account), two optional 1:1
sections (emergency contact, beneficial owner) and two replaceable child
collections. Status and approval stamps only change through the methods
below so that approval and rejection stamps stay mutually exclusive.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from account_opening.domain.errors import InvalidStateError, ValidationError

from .base import utc_now
from .enums import ACTIVE_STATUSES, CustomerType, SubmissionStatus

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date, datetime
    from decimal import Decimal

    from .enums import ActorRole


@dataclass(eq=False, kw_only=True)
class PersonalProfile:
    name: str
    alias: str | None = None
    identity_type: str | None = None
    identity_number: str
    identity_valid_until: date | None = None
    birth_place: str | None = None
    birth_date: date
    identity_address: str | None = None
    street_address: str | None = None
    province: str | None = None
    city: str | None = None
    district: str | None = None
    sub_district: str | None = None
    postal_code: str | None = None
    domicile_address: str | None = None
    home_status: str | None = None
    email: str
    phone: str
    citizenship: str | None = None
    gender: str | None = None
    marital_status: str | None = None
    religion: str | None = None
    education: str | None = None
    mother_name: str | None = None
    tax_id: str | None = None
    account_for_self: bool = True
    customer_type: CustomerType = CustomerType.NEW
    legacy_account_number: str | None = None


@dataclass(eq=False, kw_only=True)
class EmploymentProfile:
    occupation: str | None = None
    employer_name: str | None = None
    employer_address: str | None = None
    employer_phone: str | None = None
    position: str | None = None
    business_field: str | None = None
    income_bracket: str | None = None
    fund_source: str | None = None
    monthly_transaction_volume: Decimal | None = None


@dataclass(eq=False, kw_only=True)
class AccountConfig:
    product_type: str | None = None
    card_type: str | None = None
    has_card: bool = False
    opening_deposit: Decimal | None = None
    account_purpose: str | None = None


@dataclass(eq=False, kw_only=True)
class EmergencyContact:
    name: str | None = None
    address: str | None = None
    phone: str | None = None
    relationship: str | None = None


@dataclass(eq=False, kw_only=True)
class BeneficialOwner:
    name: str
    address: str | None = None
    birth_place: str | None = None
    birth_date: date | None = None
    gender: str | None = None
    citizenship: str | None = None
    marital_status: str | None = None
    identity_type: str | None = None
    identity_number: str | None = None
    fund_source: str | None = None
    relationship: str | None = None
    phone: str | None = None
    occupation: str | None = None
    annual_income: str | None = None


@dataclass(eq=False, kw_only=True)
class OtherBankHolding:
    id: int | None = None
    bank_name: str
    account_type: str
    account_number: str


@dataclass(eq=False, kw_only=True)
class OtherOccupation:
    id: int | None = None
    description: str


@dataclass(eq=False, kw_only=True)
class Submission:
    id: int | None = None
    branch_id: int
    reference_code: str
    status: SubmissionStatus = SubmissionStatus.PENDING
    created_at: datetime = field(default_factory=utc_now)
    # None for public submissions; drives the access policy's owner role.
    created_by_role: ActorRole | None = None
    approved_by: str | None = None
    approved_at: datetime | None = None
    rejected_by: str | None = None
    rejected_at: datetime | None = None
    original_approved_by: str | None = None
    original_approved_at: datetime | None = None
    edit_count: int = 0
    last_edited_by: str | None = None
    last_edited_at: datetime | None = None

    personal: PersonalProfile
    employment: EmploymentProfile = field(default_factory=EmploymentProfile)
    account: AccountConfig = field(default_factory=AccountConfig)
    emergency_contact: EmergencyContact | None = None
    beneficial_owner: BeneficialOwner | None = None
    other_bank_holdings: list[OtherBankHolding] = field(default_factory=list)
    other_occupations: list[OtherOccupation] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.check_beneficial_owner()

    @property
    def is_active(self) -> bool:
        """Active submissions block new ones with the same identity number."""
        return self.status in ACTIVE_STATUSES

    @property
    def was_edited(self) -> bool:
        return self.edit_count > 0

    # Status ----------------------------------------------------------------

    def change_status(self, status: SubmissionStatus, *, by: str, at: datetime) -> None:
        if status is SubmissionStatus.PENDING and self.was_edited:
            raise InvalidStateError(
                f"Submission {self.reference_code} was edited after approval "
                "and cannot return to pending"
            )
        self.status = status
        if status is SubmissionStatus.APPROVED:
            self.approved_by, self.approved_at = by, at
            self.rejected_by = self.rejected_at = None
        elif status is SubmissionStatus.REJECTED:
            self.rejected_by, self.rejected_at = by, at
            self.approved_by = self.approved_at = None
        else:
            self.approved_by = self.approved_at = None
            self.rejected_by = self.rejected_at = None

    # Post-approval edits ---------------------------------------------------

    def ensure_editable(self) -> None:
        if self.status is not SubmissionStatus.APPROVED:
            raise InvalidStateError(
                f"Only approved submissions can be edited; {self.reference_code} is {self.status}"
            )

    def freeze_original_approval(self) -> None:
        """Keep the first approver once later re-approvals overwrite ``approved_by``."""
        if self.was_edited:
            return
        self.original_approved_by = self.approved_by
        self.original_approved_at = self.approved_at

    def record_edit(self, *, by: str, at: datetime) -> None:
        self.edit_count += 1
        self.last_edited_by = by
        self.last_edited_at = at

    # Beneficial owner invariant --------------------------------------------

    def check_beneficial_owner(self) -> None:
        if self.personal.account_for_self and self.beneficial_owner is not None:
            raise ValidationError("A beneficial owner cannot be recorded for a self-owned account")

    def clear_beneficial_owner(self) -> bool:
        """Drop the beneficial owner row; returns whether one existed."""
        existed = self.beneficial_owner is not None
        self.beneficial_owner = None
        return existed

    # Child collections -----------------------------------------------------

    def replace_other_bank_holdings(self, holdings: Iterable[OtherBankHolding]) -> None:
        self.other_bank_holdings = list(holdings)

    def replace_other_occupations(self, occupations: Iterable[OtherOccupation]) -> None:
        self.other_occupations = list(occupations)
