"""Pipeline coordinator for the claims clearinghouse."""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from clearinghouse.config.settings import Settings
from clearinghouse.console.logger import PipelineConsole
from clearinghouse.core.exceptions import ClaimParseError, PipelineError
from clearinghouse.core.models import ARRecord  # noqa: TC001 - Pydantic needs at runtime
from clearinghouse.intake.reader import parse_line, read_lines
from clearinghouse.intake.token_bucket import TokenBucket
from clearinghouse.orchestrator.messages import (
    ClaimAdmitted,
    ClaimFailed,
    EndOfInput,
    ParseFailed,
)
from clearinghouse.orchestrator.workers import WorkerPool
from clearinghouse.payers.pricing import PayerSimulator
from clearinghouse.reporting.reporter import ARReporter
from clearinghouse.storage.ar_store import ARStore


if TYPE_CHECKING:
    from clearinghouse.config.settings import PipelineConfig
    from clearinghouse.orchestrator.messages import AdmissionMessage, ResultMessage

logger = logging.getLogger(__name__)
parser_logger = logging.getLogger(f"{__name__}.parser")


class PipelineResult(BaseModel):
    """Line accounting and final AR snapshot of a completed run."""

    total_lines: int = 0
    processed: int = 0
    failed: int = 0
    parse_errors: int = 0
    records: list[ARRecord] = Field(default_factory=list)

    @property
    def completed(self) -> int:
        return self.processed - self.failed


class Pipeline:
    """Runs a claim file through parser, worker pool and AR store.

    Thread layout: one parser thread feeding a bounded admission queue, a
    coordinator loop (the calling thread) forwarding claims to a fixed
    worker pool and draining results, and a daemon reporter printing the
    AR store on an interval.
    """

    def __init__(
        self,
        config: PipelineConfig,
        settings: Settings | None = None,
        console: PipelineConsole | None = None,
        simulator: PayerSimulator | None = None,
    ) -> None:
        if settings is None:
            settings = Settings()
        self.config = config
        self.settings = settings
        self.console = console or PipelineConsole()
        self.simulator = simulator or PayerSimulator.from_settings(settings.payers)
        self.store = ARStore()

    def run(self) -> PipelineResult:
        """Process every line of the configured file and print the final report.

        Raises:
            OSError: If the input file cannot be read.
            PipelineError: If the parser or the whole worker pool dies
                while claims are outstanding.
        """
        tuning = self.settings.pipeline

        logger.info("Reading file: %s", self.config.file_path)
        lines = list(read_lines(self.config.file_path))
        logger.info("File read complete: %d lines loaded", len(lines))

        results: queue.Queue[ResultMessage] = queue.Queue()
        pool = WorkerPool(
            self.config.num_threads,
            self.simulator,
            self.store,
            results,
            capacity=tuning.max_in_flight,
        )
        pool.start()

        reporter = ARReporter(self.store, self.console, tuning.report_interval_seconds)
        reporter.start()

        admission: queue.Queue[AdmissionMessage] = queue.Queue(maxsize=tuning.admission_capacity)
        parser = threading.Thread(
            target=self._parse_lines, args=(lines, admission), name="parser", daemon=True
        )
        parser.start()

        try:
            result = self._coordinate(admission, results, pool, parser)
        finally:
            reporter.stop()
        result.total_lines = len(lines)

        logger.info("Shutting down thread pool")
        pool.shutdown()

        logger.info(
            "Processing complete: %d claims processed, %d parse errors",
            result.processed,
            result.parse_errors,
        )
        result.records = self.store.snapshot()
        self.console.print_report(result.records)
        return result

    def _parse_lines(self, lines: list[str], admission: queue.Queue[AdmissionMessage]) -> None:
        """Parser thread: rate-limit, decode and forward every line."""
        parser_logger.info("Starting parser thread")
        bucket = TokenBucket(self.config.rate_per_second, self.config.refill_rate)
        every = self.settings.pipeline.parse_progress_every
        parsed = errors = 0

        for line_number, line in enumerate(lines, start=1):
            while not bucket.try_consume(1):
                time.sleep(bucket.retry_interval)

            try:
                claim = parse_line(line, line_number)
            except ClaimParseError as e:
                errors += 1
                parser_logger.warning("Parse error on %s", e)
                admission.put(ParseFailed(line_number=line_number, error=e.message))
                continue

            parsed += 1
            if parsed % every == 0:
                parser_logger.info("Parsed %d claims", parsed)
            admission.put(ClaimAdmitted(claim=claim))

        parser_logger.info("Parser complete: %d parsed, %d errors", parsed, errors)
        admission.put(EndOfInput())

    def _coordinate(
        self,
        admission: queue.Queue[AdmissionMessage],
        results: queue.Queue[ResultMessage],
        pool: WorkerPool,
        parser: threading.Thread,
    ) -> PipelineResult:
        """Main loop: poll both queues without blocking until all work is done."""
        tuning = self.settings.pipeline
        result = PipelineResult()
        active = 0
        parsing_complete = False

        logger.info("Main event loop starting with %d workers", len(pool))
        while True:
            idle = True

            # Admissions are only drained while fewer than max_in_flight claims are out
            if not parsing_complete and active < tuning.max_in_flight:
                try:
                    message = admission.get_nowait()
                except queue.Empty:
                    if not parser.is_alive() and admission.empty():
                        raise PipelineError("Parser stopped before end of input") from None
                else:
                    idle = False
                    if isinstance(message, ClaimAdmitted):
                        pool.submit(message.claim)
                        active += 1
                    elif isinstance(message, ParseFailed):
                        result.parse_errors += 1
                    else:
                        parsing_complete = True
                        logger.info("Parsing phase complete: %d errors", result.parse_errors)

            try:
                outcome = results.get_nowait()
            except queue.Empty:
                if active and not pool.any_alive():
                    raise PipelineError("All workers stopped with claims outstanding") from None
            else:
                idle = False
                active -= 1
                result.processed += 1
                if isinstance(outcome, ClaimFailed):
                    result.failed += 1
                    logger.warning("Claim %s failed: %s", outcome.claim_id, outcome.error)
                else:
                    logger.info("Claim %s processed", outcome.claim_id)
                if result.processed % tuning.result_progress_every == 0:
                    logger.info(
                        "Progress: %d processed, %d active", result.processed, active
                    )

            if parsing_complete and active == 0:
                return result
            if idle:
                time.sleep(tuning.poll_interval_seconds)
