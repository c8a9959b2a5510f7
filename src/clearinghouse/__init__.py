"""clearinghouse - Concurrent claims clearinghouse simulator.

This package provides a threaded pipeline for:
- Reading line-delimited JSON claims under a token-bucket admission rate
- Validating claims against field and business rules
- Pricing claims through simulated payers
- Deriving accounts-receivable records
- Reporting AR aging and per-patient statistics
"""

from __future__ import annotations

from clearinghouse.config.settings import PipelineConfig, Settings
from clearinghouse.core.models import ARRecord, Claim, PricedServiceLine, Remittance
from clearinghouse.core.types import Gender, PayerId
from clearinghouse.orchestrator.pipeline import Pipeline, PipelineResult


__version__ = "0.1.0"
__author__ = "Roni"

__all__ = [
    "ARRecord",
    "Claim",
    "Gender",
    "PayerId",
    "Pipeline",
    "PipelineConfig",
    "PipelineResult",
    "PricedServiceLine",
    "Remittance",
    "Settings",
]
