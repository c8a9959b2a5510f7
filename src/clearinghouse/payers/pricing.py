"""Simulated payer adjudication.

All payers share one pricing routine; they differ only in the numbers of
their PayerProfile. For each billable service line:

    billed       = unit_charge_amount x units
    not_allowed  = billed x denial            (denial ~ U(denial_range))
    allowed      = billed - not_allowed
    deductible   = min(allowed, cap)          (cap ~ U(deductible_range))
    copay        = sampled copay, only if the remainder exceeds it
    payer_paid   = remainder x coverage       (coverage ~ U(coverage_range))
    coinsurance  = remainder - payer_paid

so the five categories always add back up to the billed amount.
"""

from __future__ import annotations

import logging
import random
import time
import uuid
from typing import TYPE_CHECKING

from pydantic import BaseModel

from clearinghouse.core.exceptions import PayerError
from clearinghouse.core.models import PricedServiceLine, Remittance
from clearinghouse.core.types import PayerId


if TYPE_CHECKING:
    from collections.abc import Callable

    from clearinghouse.config.settings import PayerSettings
    from clearinghouse.core.models import Claim, ServiceLine

logger = logging.getLogger(__name__)

Range = tuple[float, float]


class PayerProfile(BaseModel):
    """Pricing parameters for one payer."""

    model_config = {"frozen": True}

    payer_id: PayerId
    denial_range: Range
    deductible_range: Range
    copay_range: Range
    coverage_range: Range
    response_range: Range = (10.0, 30.0)

    @property
    def name(self) -> str:
        return self.payer_id.display_name


DEFAULT_PROFILES: dict[PayerId, PayerProfile] = {
    PayerId.MEDICARE: PayerProfile(
        payer_id=PayerId.MEDICARE,
        denial_range=(0.0, 0.10),
        deductible_range=(257.0, 257.0),
        copay_range=(0.0, 0.0),
        coverage_range=(0.80, 0.80),
    ),
    PayerId.UNITED_HEALTH_GROUP: PayerProfile(
        payer_id=PayerId.UNITED_HEALTH_GROUP,
        denial_range=(0.05, 0.15),
        deductible_range=(1800.0, 1800.0),
        copay_range=(25.0, 35.0),
        coverage_range=(0.70, 0.80),
    ),
    PayerId.ANTHEM: PayerProfile(
        payer_id=PayerId.ANTHEM,
        denial_range=(0.05, 0.20),
        deductible_range=(1650.0, 2000.0),
        copay_range=(20.0, 30.0),
        coverage_range=(0.70, 0.70),
    ),
}


def build_profiles(settings: PayerSettings) -> dict[PayerId, PayerProfile]:
    """Default profiles with the configured response time range."""
    response_range = (settings.min_response_seconds, settings.max_response_seconds)
    return {
        payer_id: profile.model_copy(update={"response_range": response_range})
        for payer_id, profile in DEFAULT_PROFILES.items()
    }


def create_remittance(claim: Claim, service_lines: list[PricedServiceLine]) -> Remittance:
    """Wrap priced lines in a remittance with a fresh id."""
    return Remittance(
        remittance_id=str(uuid.uuid4()),
        claim_id=claim.claim_id,
        payer_id=claim.insurance.payer_id.display_name,
        payee_npi=claim.organization.billing_npi or "",
        patient_id=claim.patient_id,
        initial_claim_ts=claim.initial_claim_ts,
        service_lines=service_lines,
    )


class PayerSimulator:
    """Prices claims the way each payer would, then waits like a slow payer."""

    def __init__(
        self,
        profiles: dict[PayerId, PayerProfile] | None = None,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the simulator.

        Args:
            profiles: Pricing profile per payer. Defaults to DEFAULT_PROFILES.
            rng: Random source for every draw; pass a seeded one for tests.
            sleep: Function used for the simulated response delay.
        """
        self.profiles = profiles if profiles is not None else dict(DEFAULT_PROFILES)
        self._rng = rng or random.Random()
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        settings: PayerSettings,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> PayerSimulator:
        return cls(profiles=build_profiles(settings), rng=rng, sleep=sleep)

    def _draw(self, bounds: Range) -> float:
        low, high = bounds
        return self._rng.uniform(low, high)

    def price_service_line(self, profile: PayerProfile, line: ServiceLine) -> PricedServiceLine:
        if not line.is_billable:
            return PricedServiceLine(
                service_line_id=line.service_line_id, procedure_code=line.procedure_code
            )

        billed = line.unit_charge_amount * line.units
        not_allowed = billed * self._draw(profile.denial_range)
        allowed = billed - not_allowed

        deductible = min(allowed, self._draw(profile.deductible_range))
        remainder = allowed - deductible

        copay = self._draw(profile.copay_range)
        if remainder <= copay:
            copay = 0.0
        remainder -= copay

        payer_paid = remainder * self._draw(profile.coverage_range)
        coinsurance = remainder - payer_paid

        return PricedServiceLine(
            service_line_id=line.service_line_id,
            procedure_code=line.procedure_code,
            billed_amount=billed,
            payer_paid_amount=payer_paid,
            coinsurance_amount=coinsurance,
            copay_amount=copay,
            deductible_amount=deductible,
            not_allowed_amount=not_allowed,
        )

    def submit_claim(self, claim: Claim) -> Remittance:
        """Adjudicate a claim and return its remittance.

        Blocks for a duration drawn from the payer's response range.

        Raises:
            PayerError: If no profile exists for the claim's payer.
        """
        profile = self.profiles.get(claim.insurance.payer_id)
        if profile is None:
            raise PayerError(f"No payer profile for {claim.insurance.payer_id.value}")

        priced = [self.price_service_line(profile, line) for line in claim.service_lines]

        delay = self._draw(profile.response_range)
        logger.debug("%s responding to claim %s in %.1fs", profile.name, claim.claim_id, delay)
        self._sleep(delay)

        return create_remittance(claim, priced)


_default_simulator = PayerSimulator()


def submit_claim_to_payer(claim: Claim) -> Remittance:
    """Route a claim to its payer using the default profiles."""
    return _default_simulator.submit_claim(claim)
