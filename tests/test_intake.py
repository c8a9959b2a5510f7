"""Tests for reading and decoding claim files."""

from __future__ import annotations

import json

import pytest

from clearinghouse.config.settings import PipelineConfig
from clearinghouse.core.exceptions import ClaimParseError
from clearinghouse.core.types import Gender, PayerId
from clearinghouse.core.utils import now_ms
from clearinghouse.intake.reader import parse_line, read_lines, run_intake


class TestReadLines:
    def test_yields_each_line(self, write_claims):
        path = write_claims(["first", "second", "third"])
        assert list(read_lines(path)) == ["first", "second", "third"]

    def test_empty_file(self, write_claims):
        path = write_claims([])
        assert list(read_lines(path)) == []

    def test_missing_file_raises_immediately(self, tmp_path):
        with pytest.raises(OSError):
            read_lines(tmp_path / "missing.jsonl")

    def test_undecodable_line_becomes_empty(self, tmp_path):
        path = tmp_path / "bad.jsonl"
        path.write_bytes(b"ok\n\xff\xfe\nstill ok\n")
        assert list(read_lines(path)) == ["ok", "", "still ok"]

    def test_strips_crlf(self, tmp_path):
        path = tmp_path / "crlf.jsonl"
        path.write_bytes(b"a\r\nb\r\n")
        assert list(read_lines(path)) == ["a", "b"]


class TestParseLine:
    def test_valid_claim(self, claim_dict):
        claim = parse_line(json.dumps(claim_dict()))
        assert claim.claim_id == "CLM-0001"
        assert claim.insurance.payer_id is PayerId.MEDICARE
        assert claim.patient.gender is Gender.FEMALE
        assert claim.service_lines[0].modifiers == ["25"]

    def test_stamps_ingestion_time(self, claim_dict):
        before = now_ms()
        claim = parse_line(json.dumps(claim_dict(initial_claim_ts=5)))
        assert before <= claim.initial_claim_ts <= now_ms()

    def test_optional_fields_may_be_absent(self, claim_dict):
        data = claim_dict()
        del data["patient"]["email"]
        del data["patient"]["address"]
        data["organization"] = {"name": "Bare Org"}
        claim = parse_line(json.dumps(data))
        assert claim.organization.billing_npi is None
        assert claim.patient.address is None

    @pytest.mark.parametrize("line", ["", "   ", "\t"])
    def test_blank_line_is_parse_error(self, line):
        with pytest.raises(ClaimParseError, match="empty"):
            parse_line(line)

    def test_malformed_json(self):
        with pytest.raises(ClaimParseError) as exc_info:
            parse_line("{not json", line_number=7)
        assert exc_info.value.line_number == 7
        assert str(exc_info.value).startswith("line 7:")

    def test_unknown_payer_variant(self, claim_dict):
        data = claim_dict(insurance={"payer_id": "aetna", "patient_member_id": "X"})
        with pytest.raises(ClaimParseError):
            parse_line(json.dumps(data))

    def test_unknown_gender_variant(self, claim_dict):
        data = claim_dict()
        data["patient"]["gender"] = "x"
        with pytest.raises(ClaimParseError):
            parse_line(json.dumps(data))

    def test_missing_required_field(self, claim_dict):
        data = claim_dict()
        del data["rendering_provider"]
        with pytest.raises(ClaimParseError):
            parse_line(json.dumps(data))

    @pytest.mark.parametrize("amount", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_amount_is_parse_error(self, claim_dict, amount):
        data = claim_dict()
        data["service_lines"][0]["unit_charge_amount"] = amount
        line = json.dumps(data)
        assert "NaN" in line or "Infinity" in line
        with pytest.raises(ClaimParseError, match="unit_charge_amount"):
            parse_line(line, line_number=3)

    @pytest.mark.parametrize(
        ("section", "field", "value"),
        [
            (None, "place_of_service_code", "11"),
            ("service_lines", "units", "3"),
            ("service_lines", "unit_charge_amount", "100.0"),
            ("service_lines", "do_not_bill", "no"),
            ("service_lines", "do_not_bill", 0),
        ],
    )
    def test_wrong_typed_field_is_parse_error(self, claim_dict, section, field, value):
        data = claim_dict()
        target = data if section is None else data[section][0]
        target[field] = value
        with pytest.raises(ClaimParseError, match=field):
            parse_line(json.dumps(data))

    def test_integer_amount_accepted(self, claim_dict):
        data = claim_dict()
        data["service_lines"][0]["unit_charge_amount"] = 100
        assert parse_line(json.dumps(data)).service_lines[0].unit_charge_amount == 100.0

    def test_business_rules_not_enforced_at_parse(self, claim_dict):
        """Empty service lines decode fine; the validator rejects them later."""
        claim = parse_line(json.dumps(claim_dict(service_lines=[])))
        assert claim.service_lines == []


class TestRunIntake:
    def test_parses_every_line(self, write_claims, claim_dict):
        path = write_claims([claim_dict(claim_id=f"C{i}") for i in range(3)])
        config = PipelineConfig(file_path=path, refill_rate=100, rate_per_second=100)
        claims = run_intake(config)
        assert [c.claim_id for c in claims] == ["C0", "C1", "C2"]

    def test_waits_for_tokens(self, write_claims, claim_dict):
        path = write_claims([claim_dict(claim_id=f"C{i}") for i in range(4)])
        config = PipelineConfig(file_path=path, refill_rate=1000, rate_per_second=1)
        assert len(run_intake(config)) == 4

    def test_first_bad_line_aborts(self, write_claims, claim_dict):
        path = write_claims([claim_dict(), "garbage"])
        config = PipelineConfig(file_path=path, refill_rate=10, rate_per_second=10)
        with pytest.raises(ClaimParseError) as exc_info:
            run_intake(config)
        assert exc_info.value.line_number == 2
