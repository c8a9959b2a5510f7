"""Command-line interface for the clearinghouse simulator."""

from __future__ import annotations

import argparse
import logging
import sys

from clearinghouse.config.settings import PipelineConfig, Settings
from clearinghouse.console.logger import PipelineConsole
from clearinghouse.core.exceptions import ConfigError, PipelineError
from clearinghouse.orchestrator.pipeline import Pipeline


logger = logging.getLogger(__name__)
CONFIG_LOG = {"component": "CONFIG"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clearinghouse",
        description="Run a claims file through simulated payers and report AR aging",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 10 tokens/sec refill, bursts of up to 20 claims, 4 workers
  %(prog)s claims.jsonl 10 20 4
        """,
    )
    parser.add_argument("file_path", help="Line-delimited JSON claims file")
    parser.add_argument("refill_rate", help="Tokens added to the admission bucket per second")
    parser.add_argument("rate_per_second", help="Admission bucket capacity")
    parser.add_argument("num_threads", nargs="?", default="1", help="Worker threads (default: 1)")
    return parser


def run(argv: list[str] | None = None, console: PipelineConsole | None = None) -> int:
    """Run the pipeline and return a process exit code."""
    args = build_parser().parse_args(argv)
    console = console or PipelineConsole()

    try:
        settings = Settings()
        console.setup_logging(settings.log_level)
        logger.info("Initializing configuration", extra=CONFIG_LOG)
        config = PipelineConfig.build(
            [args.file_path, args.refill_rate, args.rate_per_second, args.num_threads]
        )
    except (ConfigError, ValueError) as e:
        console.print_error(f"Config error: {e}")
        return 1

    logger.info(
        "Configuration loaded: file=%s, threads=%d, rate=%d/sec",
        config.file_path,
        config.num_threads,
        config.rate_per_second,
        extra=CONFIG_LOG,
    )

    try:
        Pipeline(config, settings, console).run()
    except OSError as e:
        console.print_error(f"Failed to read file: {e}")
        return 1
    except PipelineError as e:
        console.print_error(str(e))
        return 1
    except KeyboardInterrupt:
        console.print_error("Cancelled by user")
        return 130
    return 0


def main() -> None:
    """Main entry point for CLI."""
    sys.exit(run())


if __name__ == "__main__":
    main()
