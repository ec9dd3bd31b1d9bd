from __future__ import annotations

from typing import List

from ..config.providers import ProviderStrategy
from ..config.settings import SELECTOR_TIMEOUT_MS
from ..models import ScrapedTuple
from ..utils.logging import get_logger
from .discovery import discover, parse_html
from .parsers import parse_fragment

logger = get_logger(__name__)


def extract_from_html(html: str, strategy: ProviderStrategy) -> List[ScrapedTuple]:
    """Discover fragments, parse them and drop repeated tuples."""
    soup = parse_html(html)
    seen = set()
    models: List[ScrapedTuple] = []
    for fragment in discover(soup, strategy):
        scraped = parse_fragment(fragment.text, strategy, fragment.method)
        if scraped is None:
            continue
        key = scraped.dedupe_key()
        if key in seen:
            continue
        seen.add(key)
        models.append(scraped)
    return models


def extract(page, strategy: ProviderStrategy) -> List[ScrapedTuple]:
    """Run a provider strategy against an open page.

    Never raises: a broken page or heuristic yields an empty list so the
    driver can move on to the next URL.
    """
    try:
        page.wait_for_selector("body", state="attached", timeout=SELECTOR_TIMEOUT_MS)
        page.wait_for_timeout(strategy.settle_ms)
        html = page.content()
        models = extract_from_html(html, strategy)
    except Exception as exc:
        logger.warning("  Error during scraping %s: %s", strategy.name, exc)
        return []

    for m in models:
        logger.debug(
            "  %s: %s input=%s output=%s%s [%s]",
            strategy.key,
            m.name,
            m.input_price,
            m.output_price,
            " (est.)" if m.output_synthesized else "",
            m.source,
        )
    return models
