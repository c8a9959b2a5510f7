"""Exception hierarchy for the clearinghouse pipeline."""

from __future__ import annotations


class ClearinghouseError(Exception):
    """Base class for all clearinghouse errors."""


class ConfigError(ClearinghouseError):
    """Invalid command-line or settings configuration."""


class ClaimParseError(ClearinghouseError):
    """A line of input could not be decoded into a claim."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.line_number = line_number

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"line {self.line_number}: {self.message}"


class ClaimValidationError(ClearinghouseError):
    """A decoded claim broke a field, format or business rule."""


class PayerError(ClearinghouseError):
    """The payer simulator could not price a claim."""


class PipelineError(ClearinghouseError):
    """Fatal coordinator failure; the run cannot continue."""
