"""Periodic AR reporter running beside the workers."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from clearinghouse.console.logger import PipelineConsole
    from clearinghouse.storage.ar_store import ARStore

logger = logging.getLogger(__name__)


class ARReporter:
    """Prints an aging and patient statistics report on a fixed interval.

    Runs as a daemon thread. It is signalled at shutdown but never joined,
    so process exit is what ends it.
    """

    def __init__(self, store: ARStore, console: PipelineConsole, interval: float = 5.0) -> None:
        self._store = store
        self._console = console
        self.interval = interval
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, name="ar-reporter", daemon=True)

    def start(self) -> None:
        logger.info("Starting AR reporting every %.1fs", self.interval)
        self._thread.start()

    def stop(self) -> None:
        """Ask the reporter to finish after its current wait."""
        self._stopped.set()

    @property
    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def report_once(self) -> None:
        self._console.print_periodic_report(self._store.snapshot())

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            self.report_once()
