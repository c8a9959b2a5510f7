"""Validation layer - claim field and business rules."""

from clearinghouse.validation.validator import validate_claim

__all__ = ["validate_claim"]
