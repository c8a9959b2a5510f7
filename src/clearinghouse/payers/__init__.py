"""Payer layer - simulated payer pricing and remittances."""

from clearinghouse.payers.pricing import (
    DEFAULT_PROFILES,
    PayerProfile,
    PayerSimulator,
    build_profiles,
    create_remittance,
    submit_claim_to_payer,
)

__all__ = [
    "DEFAULT_PROFILES",
    "PayerProfile",
    "PayerSimulator",
    "build_profiles",
    "create_remittance",
    "submit_claim_to_payer",
]
