"""Per-provider extraction strategies.

The regexes here are contracts: they are audited and replaced as data, the
pipeline driver never branches on a provider key.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Pattern, Tuple

from ..utils.logging import get_logger

logger = get_logger(__name__)

# Discovery method tags; also used as ScrapedTuple.source.
TABLE = "table"
PRICE_CLASS = "price-element"
HEADING = "heading"
TEXT_NODE = "text-node"
BLOCK = "block"

ALL_METHODS = (TABLE, PRICE_CLASS, HEADING, TEXT_NODE, BLOCK)


@dataclass(frozen=True)
class ProviderStrategy:
    key: str
    name: str
    urls: Tuple[str, ...]
    keyword_pattern: Pattern[str]
    model_pattern: Pattern[str]
    name_template: str
    input_pattern: Optional[Pattern[str]] = None
    output_pattern: Optional[Pattern[str]] = None
    min_prices: int = 1
    synthesis_factor: Optional[float] = None
    read_output: bool = True
    settle_ms: int = 2000
    methods: Tuple[str, ...] = (TABLE, BLOCK)
    leaf_keyword: str = "token"
    block_limit: int = 300

    @property
    def positional(self) -> bool:
        return self.input_pattern is None and self.output_pattern is None

    def with_urls(self, urls: Iterable[str]) -> "ProviderStrategy":
        return replace(self, urls=tuple(urls))


STRATEGIES: Dict[str, ProviderStrategy] = {
    "openai": ProviderStrategy(
        key="openai",
        name="OpenAI",
        urls=(
            "https://openai.com/api/pricing/",
            "https://openai.com/pricing",
        ),
        keyword_pattern=re.compile(r"GPT|o\d+"),
        model_pattern=re.compile(r"GPT-[\d.]+[a-z-]*|o\d+[-\w]*", re.IGNORECASE),
        name_template="{0}",
        input_pattern=re.compile(r"input.*?\$?([\d.]+)", re.IGNORECASE),
        output_pattern=re.compile(r"output.*?\$?([\d.]+)", re.IGNORECASE),
        settle_ms=2000,
        methods=(TABLE, PRICE_CLASS, HEADING, TEXT_NODE),
        block_limit=500,
    ),
    "anthropic": ProviderStrategy(
        key="anthropic",
        name="Anthropic",
        urls=(
            "https://www.anthropic.com/pricing",
            "https://www.anthropic.com/api/pricing",
        ),
        keyword_pattern=re.compile(r"Claude"),
        model_pattern=re.compile(r"Claude\s+([\d.]+\s+\w+)", re.IGNORECASE),
        name_template="Claude {1}",
        min_prices=2,
        settle_ms=3000,
        block_limit=500,
    ),
    "google": ProviderStrategy(
        key="google",
        name="Google AI",
        urls=(
            "https://ai.google.dev/pricing",
            "https://cloud.google.com/vertex-ai/generative-ai/pricing",
        ),
        keyword_pattern=re.compile(r"Gemini"),
        model_pattern=re.compile(r"Gemini\s+([\d.]+\s+\w+)", re.IGNORECASE),
        name_template="Gemini {1}",
        synthesis_factor=4,
        read_output=False,
        settle_ms=3000,
    ),
    "mistral": ProviderStrategy(
        key="mistral",
        name="Mistral AI",
        urls=(
            "https://mistral.ai/technology/#pricing",
            "https://docs.mistral.ai/platform/pricing/",
        ),
        keyword_pattern=re.compile(r"Mistral|Codestral|Pixtral"),
        model_pattern=re.compile(r"(Mistral|Codestral|Pixtral)\s+(\w+)", re.IGNORECASE),
        name_template="{1} {2}",
        synthesis_factor=3,
        settle_ms=2000,
    ),
    "cohere": ProviderStrategy(
        key="cohere",
        name="Cohere",
        urls=(
            "https://cohere.com/pricing",
            "https://docs.cohere.com/docs/pricing",
        ),
        keyword_pattern=re.compile(r"Command"),
        model_pattern=re.compile(r"Command\s*(R\+|R|Light)?", re.IGNORECASE),
        name_template="Command {1}",
        synthesis_factor=2,
        settle_ms=2000,
    ),
}


def get_strategy(key: str) -> Optional[ProviderStrategy]:
    return STRATEGIES.get(key.strip().lower())


def resolve_providers(
    selection,
    strategies: Optional[Dict[str, ProviderStrategy]] = None,
) -> List[str]:
    """Turn ``all`` / ``"openai,google"`` / a list of keys into registry keys.

    The result follows registry declaration order. Unknown keys are logged
    and skipped.
    """
    registry = STRATEGIES if strategies is None else strategies

    if selection is None:
        return list(registry)
    if isinstance(selection, str):
        requested = [part.strip().lower() for part in selection.split(",")]
    else:
        requested = [str(part).strip().lower() for part in selection]
    requested = [r for r in requested if r]

    if not requested or "all" in requested:
        return list(registry)

    for key in requested:
        if key not in registry:
            logger.warning("No scraper configured for: %s", key)
    wanted = set(requested)
    return [key for key in registry if key in wanted]
