"""Console logging and report output for the pipeline."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from clearinghouse.console.display import render_ar_report, render_empty_report


if TYPE_CHECKING:
    from clearinghouse.core.models import ARRecord


LOG_FORMAT = "%(epoch_ms)d [%(component)s]: %(message)s"


class ComponentFilter(logging.Filter):
    """Tag records with a millisecond timestamp and an upper-case component name."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.epoch_ms = int(record.created * 1000)
        if not hasattr(record, "component"):
            record.component = record.name.rsplit(".", 1)[-1].upper()
        return True


class PipelineConsole:
    """Rich console interface for diagnostics (stderr) and reports (stdout)."""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self.console = Console(file=out, highlight=False, emoji=False, soft_wrap=True)
        self.err_console = Console(file=err, stderr=err is None, soft_wrap=True)

    def setup_logging(self, level: str = "INFO") -> None:
        handler = RichHandler(
            console=self.err_console,
            show_time=False,
            show_level=False,
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(ComponentFilter())
        logging.basicConfig(level=level.upper(), handlers=[handler], force=True)

    def print_report(self, records: list[ARRecord], now_ms: int | None = None) -> None:
        self.console.print(render_ar_report(records, now_ms), markup=False)

    def print_periodic_report(self, records: list[ARRecord], now_ms: int | None = None) -> None:
        """Print the periodic report, collapsed to a zero-report while empty."""
        if not records:
            self.console.print(render_empty_report(), markup=False)
            return
        self.print_report(records, now_ms)

    def print_error(self, error: str) -> None:
        self.err_console.print(f"[red]Error:[/red] {escape(error)}")
