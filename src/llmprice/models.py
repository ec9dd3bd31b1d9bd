from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import settings


@dataclass
class ScrapedTuple:
    name: str
    input_price: Optional[float]
    output_price: Optional[float]
    source: str
    output_synthesized: bool = False

    def dedupe_key(self) -> str:
        return f"{self.name}_{_price_key(self.input_price)}_{_price_key(self.output_price)}"


def _price_key(value: Optional[float]) -> str:
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclass
class PriceChange:
    provider: str
    model: str
    old_input: float
    old_output: float
    new_input: float
    new_output: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "model": self.model,
            "oldPrices": {"input": self.old_input, "output": self.old_output},
            "newPrices": {"input": self.new_input, "output": self.new_output},
        }


@dataclass
class ProviderSuccess:
    provider: str
    models: int
    url: str
    updated: int = 0
    unmatched: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "models": self.models,
            "url": self.url,
            "updated": self.updated,
            "unmatched": self.unmatched,
        }


@dataclass
class ProviderFailure:
    provider: str
    error: str

    def to_dict(self) -> Dict[str, Any]:
        return {"provider": self.provider, "error": self.error}


@dataclass
class ProviderOutcome:
    """Per-provider state: pending -> trying -> succeeded | failed."""

    key: str
    name: str
    state: str = "pending"
    url: Optional[str] = None
    tuples: List[ScrapedTuple] = field(default_factory=list)
    attempts: List[str] = field(default_factory=list)
    last_error: Optional[str] = None

    def trying(self, url: str) -> None:
        self.state = "trying"
        self.url = url
        self.attempts.append(url)

    def succeed(self, url: str, tuples: List[ScrapedTuple]) -> None:
        self.state = "succeeded"
        self.url = url
        self.tuples = tuples

    def fail(self, error: Optional[str]) -> None:
        self.state = "failed"
        self.last_error = error or "No models found"


@dataclass
class RunReport:
    timestamp: str
    duration_ms: int
    selected: int
    providers: List[ProviderSuccess] = field(default_factory=list)
    changes: List[PriceChange] = field(default_factory=list)
    errors: List[ProviderFailure] = field(default_factory=list)

    @property
    def total_providers(self) -> int:
        return len(self.providers)

    @property
    def total_models(self) -> int:
        return sum(p.models for p in self.providers)

    @property
    def total_unmatched(self) -> int:
        return sum(p.unmatched for p in self.providers)

    @property
    def all_failed(self) -> bool:
        return self.selected > 0 and len(self.errors) >= self.selected

    @property
    def partial_failure(self) -> bool:
        return bool(self.errors) and not self.all_failed

    @property
    def exit_code(self) -> int:
        return 1 if self.all_failed else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "duration": self.duration_ms,
            "totalProviders": self.total_providers,
            "totalModels": self.total_models,
            "totalChanges": len(self.changes),
            "totalUnmatched": self.total_unmatched,
            "partialFailure": self.partial_failure,
            "exitCode": self.exit_code,
            "providers": [p.to_dict() for p in self.providers],
            "changes": [c.to_dict() for c in self.changes],
            "errors": [e.to_dict() for e in self.errors],
        }


@dataclass
class RunConfig:
    providers: Union[str, List[str]] = "all"
    catalog_path: Path = settings.CATALOG_FILE
    report_path: Path = settings.REPORT_FILE
    urls: Dict[str, List[str]] = field(default_factory=dict)
    wait_until: str = "domcontentloaded"
    headless: bool = True
    navigation_timeout_ms: int = settings.NAVIGATION_TIMEOUT_MS
    protect_output: bool = False
    prefer_longest: bool = True

    @classmethod
    def from_env(cls, **overrides: Any) -> "RunConfig":
        base = cls(
            providers=settings.env_providers(),
            catalog_path=settings.env_path("LLMPRICE_CATALOG", settings.CATALOG_FILE),
            report_path=settings.env_path("LLMPRICE_REPORT", settings.REPORT_FILE),
            wait_until=settings.env_wait_until(),
            headless=not settings.env_flag("LLMPRICE_HEADFUL"),
        )
        for key, value in overrides.items():
            if value is not None:
                setattr(base, key, value)
        return base
