"""Tests for the simulated payer pricing."""

from __future__ import annotations

import random

import pytest

from clearinghouse.config.settings import PayerSettings
from clearinghouse.core.exceptions import PayerError
from clearinghouse.core.types import PayerId
from clearinghouse.payers.pricing import (
    DEFAULT_PROFILES,
    PayerSimulator,
    build_profiles,
    create_remittance,
)


TOLERANCE = 0.01

PAYER_NAMES = {
    "medicare": "Medicare",
    "united_health_group": "UnitedHealthGroup",
    "anthem": "Anthem",
}


def _line(line_id: str, amount: float = 100.0, units: int = 1, do_not_bill=None):
    return {
        "service_line_id": line_id,
        "procedure_code": "99213",
        "units": units,
        "details": "Visit",
        "unit_charge_currency": "USD",
        "unit_charge_amount": amount,
        "do_not_bill": do_not_bill,
    }


def _insurance(payer: str, member: str = "MBR-100"):
    return {"payer_id": payer, "patient_member_id": member}


class TestPricingConservation:
    @pytest.mark.parametrize("payer", list(PAYER_NAMES))
    @pytest.mark.parametrize("amount", [0.5, 30.0, 100.0, 2500.0, 125000.0])
    def test_categories_sum_to_billed(self, make_claim, payer, amount):
        sim = PayerSimulator(rng=random.Random(7), sleep=lambda _: None)
        claim = make_claim(
            insurance=_insurance(payer), service_lines=[_line("A", amount, units=3)]
        )
        for _ in range(20):
            priced = sim.submit_claim(claim).service_lines[0]
            assert priced.billed_amount == pytest.approx(amount * 3)
            assert abs(priced.billed_amount - priced.adjudicated_total) <= TOLERANCE
            for value in (
                priced.payer_paid_amount,
                priced.coinsurance_amount,
                priced.copay_amount,
                priced.deductible_amount,
                priced.not_allowed_amount,
            ):
                assert value >= 0

    def test_medicare_small_claim(self, make_claim, simulator):
        """Medicare: no copay, deductible absorbs the whole allowed amount under the cap."""
        priced = simulator.submit_claim(make_claim()).service_lines[0]
        assert priced.billed_amount == pytest.approx(100.0)
        assert priced.copay_amount == 0.0
        assert priced.deductible_amount <= 100.0
        assert priced.deductible_amount == pytest.approx(100.0 - priced.not_allowed_amount)

    def test_medicare_deductible_cap_and_split(self, make_claim, simulator):
        claim = make_claim(service_lines=[_line("A", 1000.0)])
        priced = simulator.submit_claim(claim).service_lines[0]
        assert priced.deductible_amount == pytest.approx(257.0)
        covered = priced.payer_paid_amount + priced.coinsurance_amount
        assert priced.payer_paid_amount == pytest.approx(covered * 0.8)

    def test_united_copay_range(self, make_claim, simulator):
        claim = make_claim(
            insurance=_insurance("united_health_group"),
            service_lines=[_line("A", 5000.0)],
        )
        priced = simulator.submit_claim(claim).service_lines[0]
        assert 25.0 <= priced.copay_amount <= 35.0
        assert priced.deductible_amount == pytest.approx(1800.0)

    def test_anthem_deductible_cap_range(self, make_claim, simulator):
        claim = make_claim(insurance=_insurance("anthem"), service_lines=[_line("A", 10000.0)])
        priced = simulator.submit_claim(claim).service_lines[0]
        assert 1650.0 <= priced.deductible_amount <= 2000.0
        assert 20.0 <= priced.copay_amount <= 30.0

    def test_copay_skipped_when_nothing_left(self, make_claim, simulator):
        """A small UHG claim is eaten by the deductible so no copay applies."""
        claim = make_claim(
            insurance=_insurance("united_health_group"), service_lines=[_line("A", 40.0)]
        )
        priced = simulator.submit_claim(claim).service_lines[0]
        assert priced.copay_amount == 0.0


class TestDoNotBill:
    def test_do_not_bill_line_is_zeroed(self, make_claim, simulator):
        claim = make_claim(service_lines=[_line("A", 500.0, do_not_bill=True)])
        priced = simulator.submit_claim(claim).service_lines[0]
        assert priced.billed_amount == 0.0
        assert priced.adjudicated_total == 0.0
        assert priced.remark_codes is None

    @pytest.mark.parametrize("flag", [False, None])
    def test_do_not_bill_false_or_absent_is_priced(self, make_claim, simulator, flag):
        claim = make_claim(service_lines=[_line("A", 500.0, do_not_bill=flag)])
        assert simulator.submit_claim(claim).service_lines[0].billed_amount == 500.0

    def test_mixed_lines(self, make_claim, simulator):
        claim = make_claim(
            service_lines=[_line("A", 200.0), _line("B", 300.0, do_not_bill=True), _line("C")]
        )
        lines = simulator.submit_claim(claim).service_lines
        assert [line.service_line_id for line in lines] == ["A", "B", "C"]
        assert [line.billed_amount for line in lines] == [200.0, 0.0, 100.0]


class TestRemittance:
    @pytest.mark.parametrize(("payer", "name"), list(PAYER_NAMES.items()))
    def test_identity_fields(self, make_claim, simulator, payer, name):
        claim = make_claim(insurance=_insurance(payer, "MBR-9"), initial_claim_ts=42)
        remittance = simulator.submit_claim(claim)
        assert remittance.claim_id == claim.claim_id
        assert remittance.payer_id == name
        assert remittance.patient_id == f"{name}-MBR-9"
        assert remittance.payee_npi == "1234567890"
        assert remittance.initial_claim_ts == 42

    def test_missing_billing_npi_gives_empty_payee(self, make_claim):
        claim = make_claim(organization={"name": "Org"})
        assert create_remittance(claim, []).payee_npi == ""

    def test_remittance_ids_unique(self, make_claim, simulator):
        claim = make_claim()
        ids = {simulator.submit_claim(claim).remittance_id for _ in range(50)}
        assert len(ids) == 50

    def test_sleeps_within_response_range(self, make_claim):
        slept: list[float] = []
        sim = PayerSimulator(
            profiles=build_profiles(
                PayerSettings(min_response_seconds=2.0, max_response_seconds=4.0)
            ),
            sleep=slept.append,
        )
        sim.submit_claim(make_claim())
        assert len(slept) == 1
        assert 2.0 <= slept[0] <= 4.0

    def test_unknown_profile_is_payer_error(self, make_claim):
        sim = PayerSimulator(
            profiles={PayerId.ANTHEM: DEFAULT_PROFILES[PayerId.ANTHEM]}, sleep=lambda _: None
        )
        with pytest.raises(PayerError, match="medicare"):
            sim.submit_claim(make_claim())


def test_default_profiles_use_ten_to_thirty_seconds():
    for profile in DEFAULT_PROFILES.values():
        assert profile.response_range == (10.0, 30.0)
