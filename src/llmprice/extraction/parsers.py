from __future__ import annotations

import re
from typing import List, Optional, Pattern

from ..config.providers import ProviderStrategy
from ..models import ScrapedTuple

NUMBER_RE = re.compile(r"\$?([\d.]+)")
DOLLAR_RE = re.compile(r"\$([\d.]+)")


def to_price(token: str) -> Optional[float]:
    try:
        value = float(token)
    except (TypeError, ValueError):
        return None
    if value < 0 or value != value or value == float("inf"):
        return None
    return value


def positional_prices(text: str) -> List[float]:
    """Numbers in reading order; ``$`` amounts win over bare numbers."""
    dollars = [p for p in (to_price(t) for t in DOLLAR_RE.findall(text)) if p is not None]
    if dollars:
        return dollars
    return [p for p in (to_price(t) for t in NUMBER_RE.findall(text)) if p is not None]


def labelled_price(pattern: Optional[Pattern[str]], text: str) -> Optional[float]:
    if pattern is None:
        return None
    match = pattern.search(text)
    if not match:
        return None
    return to_price(match.group(1))


def build_name(template: str, match: "re.Match[str]") -> str:
    groups = [match.group(0)] + [g or "" for g in match.groups()]
    return " ".join(template.format(*groups).split())


def parse_fragment(text: str, strategy: ProviderStrategy, source: str) -> Optional[ScrapedTuple]:
    """Turn one discovered fragment into a tuple, or ``None``.

    Prices are read only after the model name so version numbers such as
    ``Claude 3.5`` never count as prices.
    """
    match = strategy.model_pattern.search(text)
    if not match:
        return None
    name = build_name(strategy.name_template, match)
    if not name:
        return None
    rest = text[match.end():]

    if strategy.positional:
        prices = positional_prices(rest)
        if len(prices) < max(1, strategy.min_prices):
            return None
        input_price: Optional[float] = prices[0]
        output_price = prices[1] if strategy.read_output and len(prices) > 1 else None
    else:
        input_price = labelled_price(strategy.input_pattern, rest)
        output_price = labelled_price(strategy.output_pattern, rest) if strategy.read_output else None
        found = sum(p is not None for p in (input_price, output_price))
        if found < max(1, strategy.min_prices):
            return None

    synthesized = False
    if output_price is None and input_price is not None and strategy.synthesis_factor:
        output_price = round(input_price * strategy.synthesis_factor, 6)
        synthesized = True

    return ScrapedTuple(
        name=name,
        input_price=input_price,
        output_price=output_price,
        source=source,
        output_synthesized=synthesized,
    )
