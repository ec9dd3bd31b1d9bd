"""Pipeline driver: crawl providers, reconcile, save catalog, write report."""

from __future__ import annotations

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Dict, List, Optional

from ..config.providers import STRATEGIES, ProviderStrategy, resolve_providers
from ..errors import ExtractionEmpty, NavigationFailed, RunCancelled
from ..extraction.extractor import extract
from ..models import ProviderFailure, ProviderOutcome, ProviderSuccess, RunConfig, RunReport
from ..processing.reconcile import ReconcileResult, reconcile
from ..processing.validate import price_warnings
from ..storage.catalog import find_provider, load_catalog, save_catalog
from ..storage.report import log_summary, write_report
from ..utils.logging import get_logger
from .browser import BrowserSession

logger = get_logger(__name__)


def _cancelled(cancel_event: Optional[threading.Event]) -> bool:
    return cancel_event is not None and cancel_event.is_set()


def scrape_provider(
    session,
    strategy: ProviderStrategy,
    config: RunConfig,
    cancel_event: Optional[threading.Event] = None,
) -> ProviderOutcome:
    """Walk the fallback URLs until one yields tuples."""
    outcome = ProviderOutcome(key=strategy.key, name=strategy.name)
    logger.info("Processing %s...", strategy.name)

    for url in strategy.urls:
        if _cancelled(cancel_event):
            outcome.fail("cancelled")
            return outcome

        outcome.trying(url)
        logger.info("  Trying URL: %s", url)
        page = None
        try:
            page = session.acquire_page(
                url,
                wait_until=config.wait_until,
                timeout_ms=config.navigation_timeout_ms,
            )
            tuples = extract(page, strategy)
            if not tuples:
                raise ExtractionEmpty(url)
        except (NavigationFailed, ExtractionEmpty) as exc:
            outcome.last_error = str(exc)
            logger.info("  Failed: %s", exc)
            continue
        finally:
            if page is not None:
                session.release_page(page)

        logger.info("  Found %d models", len(tuples))
        outcome.succeed(url, tuples)
        return outcome

    outcome.fail(outcome.last_error)
    return outcome


def run_pipeline(
    config: Optional[RunConfig] = None,
    session_factory: Optional[Callable[[], object]] = None,
    strategies: Optional[Dict[str, ProviderStrategy]] = None,
    cancel_event: Optional[threading.Event] = None,
) -> RunReport:
    """Run one full update and return its report.

    Catalog, save and browser errors propagate. The catalog is saved once,
    after every provider is reconciled, and the report after the save.
    """
    config = config or RunConfig.from_env()
    registry = STRATEGIES if strategies is None else strategies
    started = time.monotonic()

    logger.info("Starting automated pricing update...")
    catalog = load_catalog(config.catalog_path)

    selected = resolve_providers(config.providers, registry)
    logger.info("Updating providers: %s", ", ".join(selected) or "(none)")

    outcomes: List[ProviderOutcome] = []
    results: Dict[str, ReconcileResult] = {}

    factory = session_factory or (lambda: BrowserSession(headless=config.headless))
    session = factory()
    try:
        if selected:
            session.start()

        for key in selected:
            if _cancelled(cancel_event):
                raise RunCancelled(f"run cancelled before {key}")
            strategy = registry[key]
            if config.urls.get(key):
                strategy = strategy.with_urls(config.urls[key])

            outcome = scrape_provider(session, strategy, config, cancel_event)
            outcomes.append(outcome)
            if outcome.state != "succeeded":
                continue

            provider = find_provider(catalog, strategy.name)
            if provider is None:
                logger.warning("  %s is not in the catalog; nothing to update", strategy.name)
                results[key] = ReconcileResult(unmatched=[t.name for t in outcome.tuples])
                continue
            results[key] = reconcile(
                provider,
                outcome.tuples,
                protect_output=config.protect_output,
                prefer_longest=config.prefer_longest,
            )

        if _cancelled(cancel_event):
            raise RunCancelled("run cancelled")

        report = RunReport(timestamp="", duration_ms=0, selected=len(selected))
        for outcome in outcomes:
            if outcome.state == "succeeded":
                res = results[outcome.key]
                report.providers.append(
                    ProviderSuccess(
                        provider=outcome.name,
                        models=len(outcome.tuples),
                        url=outcome.url,
                        updated=len(res.changes),
                        unmatched=len(res.unmatched),
                    )
                )
                report.changes.extend(res.changes)
            else:
                report.errors.append(ProviderFailure(outcome.name, outcome.last_error))

        warnings = price_warnings(catalog)
        for change in report.changes:
            codes = warnings.get(f"{change.provider}/{change.model}")
            if codes:
                logger.warning("  Suspicious price for %s: %s", change.model, ", ".join(codes))

        report.timestamp = save_catalog(config.catalog_path, catalog)
        report.duration_ms = int((time.monotonic() - started) * 1000)
        write_report(config.report_path, report)
        log_summary(report)
        return report
    finally:
        session.shutdown()


def submit_run(
    config: Optional[RunConfig] = None,
    executor: Optional[ThreadPoolExecutor] = None,
    **kwargs,
) -> "Future[RunReport]":
    """Start :func:`run_pipeline` in the background.

    The future resolves once catalog and report are on disk.
    """
    if executor is not None:
        return executor.submit(run_pipeline, config, **kwargs)

    own = ThreadPoolExecutor(max_workers=1, thread_name_prefix="llmprice-run")
    try:
        return own.submit(run_pipeline, config, **kwargs)
    finally:
        own.shutdown(wait=False)
