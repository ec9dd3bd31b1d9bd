from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

from ..errors import SaveFailed
from ..models import RunReport
from ..utils.logging import get_logger

logger = get_logger(__name__)


def write_report(path: Union[str, Path], report: RunReport) -> Path:
    """Write the JSON run report, creating the parent directory."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(report.to_dict(), indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
    except OSError as exc:
        raise SaveFailed(path, f"could not write report: {exc}") from exc
    logger.info("Scraping report saved to %s", path)
    return path


def _price(value) -> str:
    return f"${value}"


def log_summary(report: RunReport, log: Optional[logging.Logger] = None) -> None:
    """Human readable run summary."""
    log = log or logger
    log.info("=" * 60)
    log.info("UPDATE SUMMARY")
    log.info("=" * 60)
    log.info("Duration: %.2f seconds", report.duration_ms / 1000)
    log.info("Providers updated: %d", report.total_providers)
    log.info("Total models found: %d", report.total_models)
    log.info("Price changes: %d", len(report.changes))
    if report.total_unmatched:
        log.info("Unmatched models: %d", report.total_unmatched)

    if report.changes:
        log.info("Price changes detected:")
        for change in report.changes:
            log.info("  %s - %s:", change.provider, change.model)
            log.info("    Input: %s → %s", _price(change.old_input), _price(change.new_input))
            log.info("    Output: %s → %s", _price(change.old_output), _price(change.new_output))

    if report.errors:
        log.warning("Errors:")
        for err in report.errors:
            log.warning("  %s: %s", err.provider, err.error)

    if report.selected == 0:
        log.warning("No known providers selected; nothing was scraped")
    elif report.all_failed:
        log.error("Every selected provider failed")
    elif report.partial_failure:
        log.warning("%d of %d providers failed", len(report.errors), report.selected)
    else:
        log.info("Pricing data updated successfully")
