"""Aging buckets and per-patient statistics over AR snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from clearinghouse.core.utils import now_ms as current_ms


if TYPE_CHECKING:
    from collections.abc import Iterable

    from clearinghouse.core.models import ARRecord


MS_PER_MINUTE = 60_000

# Upper edges, in minutes, of the finite buckets. Each bucket is half-open:
# an age of exactly 1.0 minute lands in the 1-2 bucket.
BUCKET_EDGES = (1.0, 2.0, 3.0)


class AgingBuckets(BaseModel):
    """Record counts by age since ingestion."""

    zero_to_one: int = 0
    one_to_two: int = 0
    two_to_three: int = 0
    three_plus: int = 0

    @property
    def counts(self) -> list[int]:
        return [self.zero_to_one, self.one_to_two, self.two_to_three, self.three_plus]

    @property
    def total(self) -> int:
        return sum(self.counts)


class PatientStatistics(BaseModel):
    """Averages of per-patient mean amounts."""

    avg_copay: float = 0.0
    avg_coinsurance: float = 0.0
    avg_deductible: float = 0.0
    patient_count: int = 0


def bucket_index(age_minutes: float) -> int:
    """Map an age in minutes to a bucket index 0-3."""
    for index, edge in enumerate(BUCKET_EDGES):
        if age_minutes < edge:
            return index
    return len(BUCKET_EDGES)


def calculate_aging_buckets(
    records: Iterable[ARRecord], now_ms: int | None = None
) -> AgingBuckets:
    """Count records into 0-1, 1-2, 2-3 and 3+ minute buckets.

    Args:
        records: AR records to bucket.
        now_ms: Reference time in epoch milliseconds; defaults to now.

    Returns:
        AgingBuckets whose counts sum to the number of records.
    """
    if now_ms is None:
        now_ms = current_ms()
    counts = [0, 0, 0, 0]
    for record in records:
        age_minutes = (now_ms - record.initial_claim_ts) / MS_PER_MINUTE
        counts[bucket_index(age_minutes)] += 1
    return AgingBuckets(
        zero_to_one=counts[0], one_to_two=counts[1], two_to_three=counts[2], three_plus=counts[3]
    )


def calculate_patient_statistics(records: Iterable[ARRecord]) -> PatientStatistics:
    """Average each patient's mean copay, coinsurance and deductible.

    Every patient weighs the same regardless of how many records they have,
    so repeating a patient's claims does not move the averages.
    """
    totals: dict[str, list[float]] = {}
    for record in records:
        entry = totals.setdefault(record.patient_id, [0.0, 0.0, 0.0, 0])
        entry[0] += record.total_copay_amount
        entry[1] += record.total_coinsurance_amount
        entry[2] += record.total_deductible_amount
        entry[3] += 1

    if not totals:
        return PatientStatistics()

    copay = coinsurance = deductible = 0.0
    for patient_copay, patient_coinsurance, patient_deductible, claims in totals.values():
        copay += patient_copay / claims
        coinsurance += patient_coinsurance / claims
        deductible += patient_deductible / claims

    patients = len(totals)
    return PatientStatistics(
        avg_copay=copay / patients,
        avg_coinsurance=coinsurance / patients,
        avg_deductible=deductible / patients,
        patient_count=patients,
    )
