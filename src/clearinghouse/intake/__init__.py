"""Intake layer - file reading, claim decoding and admission rate limiting."""

from clearinghouse.intake.reader import parse_line, read_lines, run_intake
from clearinghouse.intake.token_bucket import TokenBucket

__all__ = ["TokenBucket", "parse_line", "read_lines", "run_intake"]
