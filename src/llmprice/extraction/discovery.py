"""DOM discovery sweeps.

Each sweep walks the rendered page and returns short text fragments that
probably describe one model and its prices. Sweeps never parse prices.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Pattern

from bs4 import BeautifulSoup, Tag

from ..config.providers import BLOCK, HEADING, PRICE_CLASS, TABLE, TEXT_NODE, ProviderStrategy
from ..utils.logging import get_logger

logger = get_logger(__name__)

NOISE_TAGS = ["script", "style", "noscript", "template", "svg"]

PRICE_CLASS_LIMIT = 500
HEADING_BLOCK_LIMIT = 1000
LEAF_LIMIT = 200


@dataclass(frozen=True)
class Fragment:
    text: str
    method: str


def parse_html(html: str) -> BeautifulSoup:
    soup = BeautifulSoup(html or "", "lxml")
    for tag in soup(NOISE_TAGS):
        tag.extract()
    return soup


def element_text(el: Tag) -> str:
    return " ".join(el.get_text(" ", strip=True).split())


def table_sweep(soup: BeautifulSoup, keyword: Pattern[str]) -> List[Fragment]:
    out: List[Fragment] = []
    for table in soup.find_all("table"):
        for row in table.find_all("tr"):
            if len(row.find_all("td")) < 2:
                continue
            text = element_text(row)
            if "$" in text and keyword.search(text):
                out.append(Fragment(text, TABLE))
    return out


def _has_price_class(tag: Tag) -> bool:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    return "price" in " ".join(classes).lower()


def price_class_sweep(soup: BeautifulSoup, limit: int = PRICE_CLASS_LIMIT) -> List[Fragment]:
    out: List[Fragment] = []
    for el in soup.find_all(_has_price_class):
        text = element_text(el)
        if "$" in text and len(text) < limit:
            out.append(Fragment(text, PRICE_CLASS))
    return out


def heading_sweep(
    soup: BeautifulSoup,
    model_pattern: Pattern[str],
    limit: int = HEADING_BLOCK_LIMIT,
) -> List[Fragment]:
    out: List[Fragment] = []
    for heading in soup.find_all(["h2", "h3"]):
        title = element_text(heading)
        if not model_pattern.search(title):
            continue
        block = heading.find_parent(["div", "section", "article", "li"])
        text = element_text(block) if block is not None else title
        if "$" not in text or len(text) >= limit:
            continue
        out.append(Fragment(text, HEADING))
    return out


def leaf_scan(soup: BeautifulSoup, keyword: str = "token", limit: int = LEAF_LIMIT) -> List[Fragment]:
    out: List[Fragment] = []
    needle = keyword.lower()
    for el in soup.find_all(True):
        if el.find(True) is not None:
            continue
        text = element_text(el)
        if "$" in text and needle in text.lower() and len(text) < limit:
            out.append(Fragment(text, TEXT_NODE))
    return out


def block_sweep(soup: BeautifulSoup, keyword: Pattern[str], limit: int) -> List[Fragment]:
    out: List[Fragment] = []
    for el in soup.find_all(True):
        text = element_text(el)
        if len(text) >= limit or "$" not in text:
            continue
        if keyword.search(text):
            out.append(Fragment(text, BLOCK))
    return out


def _unique(fragments: Iterable[Fragment]) -> List[Fragment]:
    seen = set()
    out: List[Fragment] = []
    for frag in fragments:
        if not frag.text or frag.text in seen:
            continue
        seen.add(frag.text)
        out.append(frag)
    return out


def discover(soup: BeautifulSoup, strategy: ProviderStrategy) -> List[Fragment]:
    """Run the strategy's sweeps in order and union their fragments."""
    found: List[Fragment] = []
    for method in strategy.methods:
        if method == TABLE:
            batch = table_sweep(soup, strategy.keyword_pattern)
        elif method == PRICE_CLASS:
            batch = price_class_sweep(soup)
        elif method == HEADING:
            batch = heading_sweep(soup, strategy.model_pattern)
        elif method == TEXT_NODE:
            batch = leaf_scan(soup, strategy.leaf_keyword)
        elif method == BLOCK:
            batch = block_sweep(soup, strategy.keyword_pattern, strategy.block_limit)
        else:
            logger.warning("Unknown discovery method %r for %s", method, strategy.key)
            continue
        logger.debug("  %s: %d fragments via %s", strategy.key, len(batch), method)
        found.extend(batch)
    return _unique(found)
