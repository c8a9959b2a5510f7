"""Static field, format and business-rule checks for claims."""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING

from clearinghouse.core.exceptions import ClaimValidationError


if TYPE_CHECKING:
    from clearinghouse.core.models import Claim


NPI_PATTERN = re.compile(r"[0-9]{10}")
EIN_PATTERN = re.compile(r"[0-9]{2}-[0-9]{7}")
ZIP_PATTERN = re.compile(r"[0-9]{5}(-[0-9]{4})?")
CURRENCY_PATTERN = re.compile(r"[A-Z]{3}")

MIN_PLACE_OF_SERVICE = 1
MAX_PLACE_OF_SERVICE = 99


def validate_claim(claim: Claim) -> None:
    """Validate a claim, stopping at the first broken rule.

    Checks run in three passes: required fields, formats, business rules.

    Raises:
        ClaimValidationError: Naming the offending field or rule.
    """
    _check_required_fields(claim)
    _check_formats(claim)
    _check_business_rules(claim)


def _require(field: str, value: str) -> None:
    if not value.strip():
        raise ClaimValidationError(f"{field} cannot be empty")


def _check_required_fields(claim: Claim) -> None:
    _require("claim_id", claim.claim_id)
    _require("patient.first_name", claim.patient.first_name)
    _require("patient.last_name", claim.patient.last_name)
    _require("patient.dob", claim.patient.dob)
    _require("organization.name", claim.organization.name)
    _require("rendering_provider.first_name", claim.rendering_provider.first_name)
    _require("rendering_provider.last_name", claim.rendering_provider.last_name)
    _require("rendering_provider.npi", claim.rendering_provider.npi)
    _require("insurance.patient_member_id", claim.insurance.patient_member_id)

    for i, line in enumerate(claim.service_lines):
        _require(f"service_lines[{i}].service_line_id", line.service_line_id)
        _require(f"service_lines[{i}].procedure_code", line.procedure_code)
        _require(f"service_lines[{i}].details", line.details)
        _require(f"service_lines[{i}].unit_charge_currency", line.unit_charge_currency)


def _check_npi(field: str, npi: str) -> None:
    if not NPI_PATTERN.fullmatch(npi):
        raise ClaimValidationError(f"{field} must be exactly 10 digits")


def _check_formats(claim: Claim) -> None:
    _check_npi("rendering_provider.npi", claim.rendering_provider.npi)
    if claim.organization.billing_npi is not None:
        _check_npi("organization.billing_npi", claim.organization.billing_npi)

    ein = claim.organization.ein
    if ein is not None and not EIN_PATTERN.fullmatch(ein):
        raise ClaimValidationError("organization.ein must match format XX-XXXXXXX")

    address = claim.patient.address
    if address is not None and address.zip is not None and not ZIP_PATTERN.fullmatch(address.zip):
        raise ClaimValidationError("patient.address.zip must be XXXXX or XXXXX-XXXX format")

    for i, line in enumerate(claim.service_lines):
        if not CURRENCY_PATTERN.fullmatch(line.unit_charge_currency):
            raise ClaimValidationError(
                f"service_lines[{i}].unit_charge_currency must be 3 uppercase letters"
            )


def _check_business_rules(claim: Claim) -> None:
    if not MIN_PLACE_OF_SERVICE <= claim.place_of_service_code <= MAX_PLACE_OF_SERVICE:
        raise ClaimValidationError(
            f"place_of_service_code must be between {MIN_PLACE_OF_SERVICE}-{MAX_PLACE_OF_SERVICE}"
        )

    if not claim.service_lines:
        raise ClaimValidationError("service_lines must contain at least one item")

    seen_ids: set[str] = set()
    first_currency = claim.service_lines[0].unit_charge_currency
    for i, line in enumerate(claim.service_lines):
        if line.service_line_id in seen_ids:
            raise ClaimValidationError(f"Duplicate service_line_id: {line.service_line_id}")
        seen_ids.add(line.service_line_id)

        if line.units < 1:
            raise ClaimValidationError(f"service_lines[{i}].units must be at least 1")
        if not math.isfinite(line.unit_charge_amount) or line.unit_charge_amount <= 0:
            raise ClaimValidationError(f"service_lines[{i}].unit_charge_amount must be positive")
        if line.unit_charge_currency != first_currency:
            raise ClaimValidationError("All service lines must use the same currency")

    billing_npi = claim.organization.billing_npi
    if billing_npi is not None and billing_npi == claim.rendering_provider.npi:
        raise ClaimValidationError("rendering_provider.npi cannot equal organization.billing_npi")
