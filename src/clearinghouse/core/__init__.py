"""Core module - Data models, shared types and errors."""

from __future__ import annotations

from clearinghouse.core.exceptions import (
    ClaimParseError,
    ClaimValidationError,
    ClearinghouseError,
    ConfigError,
    PayerError,
    PipelineError,
)
from clearinghouse.core.models import (
    Address,
    ARRecord,
    Claim,
    Contact,
    Insurance,
    Organization,
    Patient,
    PricedServiceLine,
    Remittance,
    RenderingProvider,
    ServiceLine,
)
from clearinghouse.core.types import Gender, PayerId
from clearinghouse.core.utils import now_ms


__all__ = [
    # Models
    "ARRecord",
    "Address",
    "Claim",
    # Errors
    "ClaimParseError",
    "ClaimValidationError",
    "ClearinghouseError",
    "ConfigError",
    "Contact",
    # Types
    "Gender",
    "Insurance",
    "Organization",
    "Patient",
    "PayerError",
    "PayerId",
    "PipelineError",
    "PricedServiceLine",
    "Remittance",
    "RenderingProvider",
    "ServiceLine",
    # Utils
    "now_ms",
]
