"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import copy
import io
import json
import random
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from clearinghouse.config.settings import PayerSettings, PipelineConfig, PipelineSettings, Settings
from clearinghouse.console.logger import PipelineConsole
from clearinghouse.core.models import Claim
from clearinghouse.payers.pricing import PayerSimulator


if TYPE_CHECKING:
    from collections.abc import Callable


BASE_CLAIM: dict[str, Any] = {
    "claim_id": "CLM-0001",
    "place_of_service_code": 11,
    "insurance": {"payer_id": "medicare", "patient_member_id": "MBR-100"},
    "patient": {
        "first_name": "Jane",
        "last_name": "Doe",
        "gender": "f",
        "dob": "1980-04-12",
        "email": "jane@example.com",
        "address": {"street": "1 Main St", "city": "Austin", "state": "TX", "zip": "78701"},
    },
    "organization": {
        "name": "Sunrise Clinic",
        "billing_npi": "1234567890",
        "ein": "12-3456789",
        "contact": {"first_name": "Ann", "last_name": "Lee", "phone_number": "555-0100"},
    },
    "rendering_provider": {"first_name": "Sam", "last_name": "Ortiz", "npi": "0987654321"},
    "service_lines": [
        {
            "service_line_id": "SL-1",
            "procedure_code": "99213",
            "modifiers": ["25"],
            "units": 1,
            "details": "Office visit",
            "unit_charge_currency": "USD",
            "unit_charge_amount": 100.0,
        }
    ],
}


def build_claim_dict(**overrides: Any) -> dict[str, Any]:
    """Deep copy of BASE_CLAIM with top-level keys replaced."""
    data = copy.deepcopy(BASE_CLAIM)
    data.update(copy.deepcopy(overrides))
    return data


@pytest.fixture
def claim_dict() -> Callable[..., dict[str, Any]]:
    """Factory for raw claim dictionaries."""
    return build_claim_dict


@pytest.fixture
def make_claim() -> Callable[..., Claim]:
    """Factory for decoded Claim models."""

    def _make(**overrides: Any) -> Claim:
        return Claim.model_validate(build_claim_dict(**overrides))

    return _make


@pytest.fixture
def write_claims(tmp_path: Path) -> Callable[[list[Any]], Path]:
    """Write a claims file; dict entries are JSON-encoded, strings written as-is."""

    def _write(entries: list[Any], name: str = "claims.jsonl") -> Path:
        path = tmp_path / name
        lines = [json.dumps(e) if isinstance(e, dict) else e for e in entries]
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with instant payers and a reporter that stays quiet."""
    return Settings(
        pipeline=PipelineSettings(poll_interval_seconds=0.001, report_interval_seconds=60.0),
        payers=PayerSettings(min_response_seconds=0.0, max_response_seconds=0.0),
    )


@pytest.fixture
def simulator() -> PayerSimulator:
    """Deterministic payer simulator that never sleeps."""
    return PayerSimulator(rng=random.Random(1234), sleep=lambda _: None)


@pytest.fixture
def report_console() -> PipelineConsole:
    """Console writing reports and diagnostics to in-memory buffers."""
    return PipelineConsole(out=io.StringIO(), err=io.StringIO())


@pytest.fixture
def pipeline_config(write_claims: Callable[[list[Any]], Path]) -> Callable[..., PipelineConfig]:
    """Factory for a PipelineConfig over a freshly written claims file."""

    def _config(entries: list[Any], num_threads: int = 1) -> PipelineConfig:
        return PipelineConfig(
            file_path=write_claims(entries),
            refill_rate=1000,
            rate_per_second=1000,
            num_threads=num_threads,
        )

    return _config
