"""Reporting layer - AR aging, patient statistics and the periodic reporter."""

from clearinghouse.reporting.reporter import ARReporter
from clearinghouse.reporting.statistics import (
    AgingBuckets,
    PatientStatistics,
    calculate_aging_buckets,
    calculate_patient_statistics,
)

__all__ = [
    "ARReporter",
    "AgingBuckets",
    "PatientStatistics",
    "calculate_aging_buckets",
    "calculate_patient_statistics",
]
