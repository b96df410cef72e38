"""
Command-line interface for the Candlestick Dashboard.

Handles argument parsing, logging setup and launching the dashboard
application. Exit code is 0 on a clean quit and non-zero when the terminal
layer fails.
"""

import argparse
import logging
import sys
from dataclasses import replace

from candledash.core.config import DEFAULT_CONFIG, DashboardConfig
from candledash.core.errors import ConfigurationError

logger = logging.getLogger("candledash")


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(description="Live candlestick dashboard for synthetic markets")
    parser.add_argument(
        "--seed", type=int, default=None, help="Seed for a reproducible price stream"
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=DEFAULT_CONFIG.log_file,
        help=f"Log file path (default: {DEFAULT_CONFIG.log_file})",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    return parser


def configure_logging(log_file: str, level: str = "INFO") -> None:
    """Log to a file only (replacing existing root handlers), so nothing is written over the terminal UI."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        handlers=[logging.FileHandler(log_file)],
        force=True,
    )


def build_config(args: argparse.Namespace) -> DashboardConfig:
    """Apply command-line overrides to the default configuration."""
    return replace(DEFAULT_CONFIG, seed=args.seed, log_file=args.log_file).validate()


def run_cli(argv: list[str] | None = None) -> int:
    """
    Parse arguments and run the dashboard.

    Returns:
        Process exit code
    """
    from candledash.ui.dashboard import CandleDashboard

    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except ConfigurationError as e:
        print(f"\n❌ Invalid configuration: {e}", file=sys.stderr)
        return 2

    configure_logging(config.log_file, args.log_level)
    logger.info(f"Starting dashboard (seed={config.seed})")

    app = CandleDashboard(config=config)
    try:
        app.run()
    finally:
        # No-op if the app already shut the loop down
        app.dashboard_loop.shutdown()

    return_code = app.return_code or 0
    logger.info(f"Dashboard exited with code {return_code}")
    return return_code


def main() -> None:
    sys.exit(run_cli())
