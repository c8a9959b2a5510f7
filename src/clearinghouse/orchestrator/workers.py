"""Fixed-size worker pool that adjudicates claims."""

from __future__ import annotations

import logging
import queue
import threading
from typing import TYPE_CHECKING

from clearinghouse.core.exceptions import ClaimValidationError
from clearinghouse.orchestrator.messages import SHUTDOWN, ClaimCompleted, ClaimFailed, Shutdown
from clearinghouse.storage.converters import remittance_to_ar
from clearinghouse.validation.validator import validate_claim


if TYPE_CHECKING:
    from clearinghouse.core.models import ARRecord, Claim
    from clearinghouse.orchestrator.messages import ResultMessage
    from clearinghouse.payers.pricing import PayerSimulator
    from clearinghouse.storage.ar_store import ARStore

logger = logging.getLogger(__name__)


def process_claim(claim: Claim, simulator: PayerSimulator) -> ARRecord:
    """Validate a claim, submit it to its payer and derive the AR record.

    Raises:
        ClaimValidationError: If the claim breaks a validation rule.
        PayerError: If the payer simulator rejects the claim.
    """
    logger.debug("Starting validation for claim %s", claim.claim_id)
    validate_claim(claim)

    logger.debug("Submitting claim %s to payer", claim.claim_id)
    remittance = simulator.submit_claim(claim)
    logger.debug("Remittance %s received for claim %s", remittance.remittance_id, claim.claim_id)

    return remittance_to_ar(remittance)


class WorkerPool:
    """N threads sharing one work queue.

    Each worker takes a claim, processes it, appends the AR record to the
    store and reports the outcome on the result queue. A SHUTDOWN marker
    ends exactly one worker.
    """

    def __init__(
        self,
        num_workers: int,
        simulator: PayerSimulator,
        store: ARStore,
        results: queue.Queue[ResultMessage],
        capacity: int = 0,
    ) -> None:
        """Initialize the pool without starting it.

        Args:
            num_workers: Number of worker threads.
            simulator: Payer simulator shared by every worker.
            store: AR store that receives successful results.
            results: Queue the coordinator drains for outcomes.
            capacity: Work queue bound; 0 means unbounded.
        """
        self.work_queue: queue.Queue[Claim | Shutdown] = queue.Queue(maxsize=capacity)
        self._simulator = simulator
        self._store = store
        self._results = results
        self._workers = [
            threading.Thread(
                target=self._worker_loop, args=(worker_id,), name=f"worker-{worker_id}", daemon=True
            )
            for worker_id in range(num_workers)
        ]

    def __len__(self) -> int:
        return len(self._workers)

    def start(self) -> None:
        logger.info("Creating worker thread pool with %d threads", len(self._workers))
        for worker in self._workers:
            worker.start()

    def submit(self, claim: Claim) -> None:
        self.work_queue.put(claim)

    def any_alive(self) -> bool:
        return any(worker.is_alive() for worker in self._workers)

    def shutdown(self) -> None:
        """Send one shutdown marker per worker and wait for all of them."""
        for _ in self._workers:
            self.work_queue.put(SHUTDOWN)
        for worker in self._workers:
            worker.join()
        logger.info("Worker pool stopped")

    def _worker_loop(self, worker_id: int) -> None:
        logger.info("Worker %d started", worker_id)
        while True:
            item = self.work_queue.get()
            if isinstance(item, Shutdown):
                logger.info("Worker %d shutting down", worker_id)
                return
            self._handle(worker_id, item)

    def _handle(self, worker_id: int, claim: Claim) -> None:
        logger.info("Worker %d received claim %s", worker_id, claim.claim_id)
        try:
            record = process_claim(claim, self._simulator)
        except ClaimValidationError as e:
            logger.warning("Worker %d failed claim %s: %s", worker_id, claim.claim_id, e)
            self._results.put(ClaimFailed(claim_id=claim.claim_id, error=f"Validation failed: {e}"))
            return
        except Exception as e:
            logger.exception("Worker %d failed claim %s", worker_id, claim.claim_id)
            self._results.put(ClaimFailed(claim_id=claim.claim_id, error=str(e)))
            return

        self._store.append(record)
        logger.info("Worker %d completed claim %s", worker_id, claim.claim_id)
        self._results.put(ClaimCompleted(claim_id=claim.claim_id))
