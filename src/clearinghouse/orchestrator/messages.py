"""Messages exchanged between the parser, coordinator and workers."""

from __future__ import annotations

from enum import Enum
from typing import Final

from pydantic import BaseModel

from clearinghouse.core.models import Claim  # noqa: TC001 - Pydantic needs at runtime


# Admission channel: parser -> coordinator


class ClaimAdmitted(BaseModel):
    """A line decoded into a claim."""

    claim: Claim


class ParseFailed(BaseModel):
    """A line that could not be decoded; it is dropped."""

    line_number: int
    error: str


class EndOfInput(BaseModel):
    """The parser has handled every line."""


AdmissionMessage = ClaimAdmitted | ParseFailed | EndOfInput


# Result channel: workers -> coordinator


class ClaimCompleted(BaseModel):
    claim_id: str


class ClaimFailed(BaseModel):
    """Validation or payer failure for one claim; no AR record was stored."""

    claim_id: str
    error: str


ResultMessage = ClaimCompleted | ClaimFailed


# Work channel: coordinator -> workers


class Shutdown(Enum):
    """Marker that ends exactly one worker."""

    TOKEN = "shutdown"


SHUTDOWN: Final = Shutdown.TOKEN
