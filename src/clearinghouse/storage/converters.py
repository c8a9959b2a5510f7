"""Converters from payer remittances to AR records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from clearinghouse.core.models import ARRecord


if TYPE_CHECKING:
    from clearinghouse.core.models import Remittance


def remittance_to_ar(remittance: Remittance) -> ARRecord:
    """Fold a remittance into an AR record with per-category totals."""
    lines = remittance.service_lines
    return ARRecord(
        claim_id=remittance.claim_id,
        remittance_id=remittance.remittance_id,
        payer_id=remittance.payer_id,
        payee_npi=remittance.payee_npi,
        patient_id=remittance.patient_id,
        initial_claim_ts=remittance.initial_claim_ts,
        total_billed_amount=sum(line.billed_amount for line in lines),
        total_payer_paid_amount=sum(line.payer_paid_amount for line in lines),
        total_coinsurance_amount=sum(line.coinsurance_amount for line in lines),
        total_copay_amount=sum(line.copay_amount for line in lines),
        total_deductible_amount=sum(line.deductible_amount for line in lines),
        total_not_allowed_amount=sum(line.not_allowed_amount for line in lines),
        service_lines=list(lines),
    )
