"""Text rendering for AR reports."""

from __future__ import annotations

from typing import TYPE_CHECKING

from clearinghouse.reporting.statistics import (
    calculate_aging_buckets,
    calculate_patient_statistics,
)


if TYPE_CHECKING:
    from clearinghouse.core.models import ARRecord


REPORT_FOOTER = "========================"


def render_ar_report(records: list[ARRecord], now_ms: int | None = None) -> str:
    """Render the aging and patient statistics report for a snapshot."""
    buckets = calculate_aging_buckets(records, now_ms)
    stats = calculate_patient_statistics(records)
    lines = [
        "=== AR Aging Report ===",
        f"Total Claims: {len(records)}",
        f"0-1 minutes: {buckets.zero_to_one}",
        f"1-2 minutes: {buckets.one_to_two}",
        f"2-3 minutes: {buckets.two_to_three}",
        f"3+ minutes: {buckets.three_plus}",
        "",
        "=== Patient Statistics ===",
        f"Total Patients: {stats.patient_count}",
        f"Average Copay per Patient: ${stats.avg_copay:.2f}",
        f"Average Coinsurance per Patient: ${stats.avg_coinsurance:.2f}",
        f"Average Deductible per Patient: ${stats.avg_deductible:.2f}",
        REPORT_FOOTER,
    ]
    return "\n".join(lines)


def render_empty_report() -> str:
    return "\n".join(["=== AR Aging Report ===", "Total Claims: 0", REPORT_FOOTER])
