"""Data models for claims, remittances and AR records."""

from __future__ import annotations

from pydantic import BaseModel, Field, StrictBool, StrictInt

from clearinghouse.core.types import Gender, PayerId  # noqa: TC001 - Pydantic needs at runtime


class Address(BaseModel):
    """Postal address; every part is optional."""

    model_config = {"frozen": True}

    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None


class Contact(BaseModel):
    """Billing contact at an organization."""

    model_config = {"frozen": True}

    first_name: str | None = None
    last_name: str | None = None
    phone_number: str | None = None


class Insurance(BaseModel):
    model_config = {"frozen": True}

    payer_id: PayerId
    patient_member_id: str


class Patient(BaseModel):
    model_config = {"frozen": True}

    first_name: str
    last_name: str
    gender: Gender
    dob: str
    email: str | None = None
    address: Address | None = None


class Organization(BaseModel):
    """Billing organization submitting the claim."""

    model_config = {"frozen": True}

    name: str
    billing_npi: str | None = None
    ein: str | None = None
    contact: Contact | None = None
    address: Address | None = None


class RenderingProvider(BaseModel):
    model_config = {"frozen": True}

    first_name: str
    last_name: str
    npi: str


class ServiceLine(BaseModel):
    """A single billable item on a claim."""

    model_config = {"frozen": True}

    service_line_id: str
    procedure_code: str
    modifiers: list[str] | None = None
    units: StrictInt
    details: str
    unit_charge_currency: str
    unit_charge_amount: float = Field(strict=True, allow_inf_nan=False)
    do_not_bill: StrictBool | None = None

    @property
    def is_billable(self) -> bool:
        return not self.do_not_bill


class Claim(BaseModel):
    """A claim as submitted by a provider.

    Only structure is checked on decode. Business rules live in the
    validator, so a claim that decodes is admitted and may still fail there.
    """

    model_config = {"frozen": True}

    claim_id: str
    place_of_service_code: StrictInt
    insurance: Insurance
    patient: Patient
    organization: Organization
    rendering_provider: RenderingProvider
    service_lines: list[ServiceLine]
    initial_claim_ts: int = Field(default=0, description="Ingestion time, epoch milliseconds")

    @property
    def patient_id(self) -> str:
        """Composite patient id, unique per payer."""
        return f"{self.insurance.payer_id.display_name}-{self.insurance.patient_member_id}"


class PricedServiceLine(BaseModel):
    """A service line as adjudicated by a payer."""

    model_config = {"frozen": True}

    service_line_id: str
    procedure_code: str
    billed_amount: float = 0.0
    payer_paid_amount: float = 0.0
    coinsurance_amount: float = 0.0
    copay_amount: float = 0.0
    deductible_amount: float = 0.0
    not_allowed_amount: float = 0.0
    remark_codes: list[str] | None = None

    @property
    def adjudicated_total(self) -> float:
        """Sum of every category the billed amount was split into."""
        return (
            self.payer_paid_amount
            + self.coinsurance_amount
            + self.copay_amount
            + self.deductible_amount
            + self.not_allowed_amount
        )


class Remittance(BaseModel):
    """Priced response returned by a payer for one claim."""

    model_config = {"frozen": True}

    remittance_id: str
    claim_id: str
    payer_id: str
    payee_npi: str
    patient_id: str
    initial_claim_ts: int
    service_lines: list[PricedServiceLine] = Field(default_factory=list)


class ARRecord(BaseModel):
    """Accounts-receivable record derived from a remittance."""

    model_config = {"frozen": True}

    claim_id: str
    remittance_id: str
    payer_id: str
    payee_npi: str
    patient_id: str
    initial_claim_ts: int
    total_billed_amount: float = 0.0
    total_payer_paid_amount: float = 0.0
    total_coinsurance_amount: float = 0.0
    total_copay_amount: float = 0.0
    total_deductible_amount: float = 0.0
    total_not_allowed_amount: float = 0.0
    service_lines: list[PricedServiceLine] = Field(default_factory=list)
