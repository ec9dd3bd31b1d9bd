"""Command line entry point for the pricing update.

Examples:
  llmprice-update
  llmprice-update --providers openai,anthropic --debug
  PROVIDERS=google python update_pricing.py
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from ..config.providers import STRATEGIES
from ..config.settings import WAIT_UNTIL_CHOICES
from ..errors import LLMPriceError, RunCancelled
from ..ingestion.orchestrator import run_pipeline
from ..models import RunConfig
from ..utils.logging import get_logger, set_console_level

logger = get_logger(__name__)


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Scrape provider pricing pages and update the LLM pricing catalog.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  llmprice-update\n"
            "  llmprice-update --providers openai,anthropic --debug\n"
            "  PROVIDERS=google python update_pricing.py"
        ),
    )
    parser.add_argument(
        "--providers",
        default=None,
        help="Comma-separated provider keys or 'all' (default: $PROVIDERS or all).",
    )
    parser.add_argument("--catalog", type=Path, default=None, help="Catalog JSON path.")
    parser.add_argument("--report", type=Path, default=None, help="Run report JSON path.")
    parser.add_argument(
        "--wait-until",
        choices=WAIT_UNTIL_CHOICES,
        default=None,
        help="Navigation readiness policy (default: domcontentloaded).",
    )
    parser.add_argument("--headful", action="store_true", help="Show the browser window.")
    parser.add_argument(
        "--keep-catalog-output",
        action="store_true",
        help="Never replace a catalog output price with an estimated one.",
    )
    parser.add_argument(
        "--first-match",
        action="store_true",
        help="Match scraped names by catalog order instead of longest match.",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose console logging.")
    parser.add_argument("--list-providers", action="store_true", help="Print configured providers and exit.")
    return parser.parse_args(argv)


def _list_providers() -> None:
    for key, strategy in STRATEGIES.items():
        logger.info("%-10s %s", key, strategy.name)
        for url in strategy.urls:
            logger.info("%-10s   %s", "", url)


def build_config(args: argparse.Namespace) -> RunConfig:
    return RunConfig.from_env(
        providers=args.providers,
        catalog_path=args.catalog,
        report_path=args.report,
        wait_until=args.wait_until,
        headless=False if args.headful else None,
        protect_output=True if args.keep_catalog_output else None,
        prefer_longest=False if args.first_match else None,
    )


def main(argv: Optional[list[str]] = None) -> int:
    args = _parse_args(argv)
    if args.debug:
        set_console_level(logging.DEBUG)

    if args.list_providers:
        _list_providers()
        return 0

    config = build_config(args)
    try:
        report = run_pipeline(config)
    except (KeyboardInterrupt, RunCancelled):
        logger.error("Update cancelled; catalog left unchanged")
        return 1
    except LLMPriceError as exc:
        logger.error("Update failed: %s", exc)
        return 1

    return report.exit_code
