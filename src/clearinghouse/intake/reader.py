"""Reading claim files and decoding claim lines."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError

from clearinghouse.core.exceptions import ClaimParseError
from clearinghouse.core.models import Claim
from clearinghouse.core.utils import now_ms
from clearinghouse.intake.token_bucket import TokenBucket


if TYPE_CHECKING:
    from collections.abc import Iterator

    from clearinghouse.config.settings import PipelineConfig

logger = logging.getLogger(__name__)


def read_lines(file_path: str | Path) -> Iterator[str]:
    """Yield each line of a UTF-8 file without its line terminator.

    The file is opened eagerly so a missing or unreadable file raises
    ``OSError`` at the call site rather than on first iteration. A line
    that is not valid UTF-8 is yielded as an empty string.

    Raises:
        OSError: If the file cannot be opened.
    """
    handle = Path(file_path).open("rb")

    def _lines() -> Iterator[str]:
        with handle:
            for raw in handle:
                try:
                    yield raw.decode("utf-8").rstrip("\r\n")
                except UnicodeDecodeError:
                    yield ""

    return _lines()


def parse_line(line: str, line_number: int | None = None) -> Claim:
    """Decode one JSON line into a claim stamped with the ingestion time.

    Any ``initial_claim_ts`` present in the input is overwritten.

    Raises:
        ClaimParseError: If the line is blank or does not decode to a claim.
    """
    if not line.strip():
        raise ClaimParseError("Failed to parse line: empty input", line_number)
    try:
        claim = Claim.model_validate_json(line)
    except ValidationError as e:
        raise ClaimParseError(f"Failed to parse line: {e}", line_number) from e
    return claim.model_copy(update={"initial_claim_ts": now_ms()})


def run_intake(config: PipelineConfig) -> list[Claim]:
    """Read and parse a whole claim file through the token bucket.

    Sequential intake without the worker pipeline; the first bad line aborts.

    Raises:
        OSError: If the file cannot be opened.
        ClaimParseError: On the first line that fails to decode.
    """
    bucket = TokenBucket(config.rate_per_second, config.refill_rate)
    claims: list[Claim] = []
    for line_number, line in enumerate(read_lines(config.file_path), start=1):
        while not bucket.try_consume(1):
            time.sleep(bucket.retry_interval)
        claims.append(parse_line(line, line_number))
    logger.info("Intake complete: %d claims", len(claims))
    return claims
