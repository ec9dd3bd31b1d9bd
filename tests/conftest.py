"""Shared fixtures for the llmprice test suite."""

import copy
import json
import sys
from pathlib import Path

import pytest

# Ensure src/ is on the path so "import llmprice" works when running from repo root.
repo_root = Path(__file__).resolve().parents[1]
src_path = repo_root / "src"
for p in (src_path, repo_root):
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from llmprice.errors import NavigationFailed  # noqa: E402

FIXTURES = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Browser doubles
# ---------------------------------------------------------------------------

class FakePage:
    """Stands in for a Playwright page: canned HTML, recorded waits."""

    def __init__(self, html="", error=None):
        self.html = html
        self.error = error
        self.waits = []
        self.context = object()

    def wait_for_selector(self, selector, **kwargs):
        self.waits.append(("selector", selector, kwargs.get("timeout")))

    def wait_for_timeout(self, ms):
        self.waits.append(("timeout", ms))

    def content(self):
        if self.error is not None:
            raise self.error
        return self.html


class FakeSession:
    """Serves canned HTML per URL.

    A value that is an exception is raised from ``acquire_page``; unknown
    URLs return an empty page.
    """

    def __init__(self, pages=None, on_visit=None):
        self.pages = dict(pages or {})
        self.on_visit = on_visit
        self.visited = []
        self.wait_policies = []
        self.released = 0
        self.started = False
        self.closed = False

    def start(self):
        self.started = True

    def acquire_page(self, url, wait_until="domcontentloaded", timeout_ms=30000):
        self.visited.append(url)
        self.wait_policies.append(wait_until)
        if self.on_visit is not None:
            self.on_visit(url)
        body = self.pages.get(url, "")
        if isinstance(body, BaseException):
            raise body
        return FakePage(body)

    def release_page(self, page):
        self.released += 1

    def shutdown(self):
        self.closed = True


def nav_timeout(url):
    return NavigationFailed(url, TimeoutError("Timeout 30000ms exceeded."))


def read_fixture(name):
    return (FIXTURES / name).read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

SAMPLE_CATALOG = {
    "lastUpdated": "2025-01-01T00:00:00.000Z",
    "providers": [
        {
            "name": "OpenAI",
            "website": "https://openai.com",
            "models": [
                {
                    "name": "GPT-4",
                    "modelId": "gpt-4",
                    "contextWindow": 8192,
                    "pricing": {"input": 25, "output": 50},
                    "category": "legacy",
                    "features": ["function-calling"],
                },
                {
                    "name": "GPT-4o",
                    "modelId": "gpt-4o",
                    "contextWindow": 128000,
                    "pricing": {"input": 2.5, "output": 10},
                    "category": "flagship",
                    "features": ["vision", "json-mode"],
                },
                {
                    "name": "GPT-4o mini",
                    "modelId": "gpt-4o-mini",
                    "contextWindow": 128000,
                    "pricing": {"input": 0.15, "output": 0.6},
                    "category": "efficient",
                    "features": ["vision"],
                },
            ],
        },
        {
            "name": "Anthropic",
            "website": "https://www.anthropic.com",
            "models": [
                {
                    "name": "Claude 3.5 Sonnet",
                    "modelId": "claude-3-5-sonnet-20241022",
                    "contextWindow": 200000,
                    "pricing": {"input": 3, "output": 15},
                    "category": "flagship",
                },
                {
                    "name": "Claude 3 Opus",
                    "modelId": "claude-3-opus-20240229",
                    "contextWindow": 200000,
                    "pricing": {"input": 15, "output": 75},
                },
            ],
        },
        {
            "name": "Google AI",
            "website": "https://ai.google.dev",
            "models": [
                {
                    "name": "Gemini 1.5 Flash",
                    "modelId": "gemini-1.5-flash",
                    "contextWindow": 1000000,
                    "pricing": {"input": 0.3, "output": 1.0},
                },
                {
                    "name": "Gemini 1.5 Pro",
                    "modelId": "gemini-1.5-pro",
                    "contextWindow": 2000000,
                    "pricing": {"input": 3.5, "output": 10.5},
                },
            ],
        },
        {
            "name": "Mistral AI",
            "website": "https://mistral.ai",
            "models": [
                {
                    "name": "Mistral Large",
                    "modelId": "mistral-large-latest",
                    "contextWindow": 128000,
                    "pricing": {"input": 2, "output": 6},
                },
            ],
        },
        {
            "name": "Cohere",
            "website": "https://cohere.com",
            "models": [
                {
                    "name": "Command R+",
                    "modelId": "command-r-plus",
                    "contextWindow": 128000,
                    "pricing": {"input": 3, "output": 15},
                },
            ],
        },
    ],
}


@pytest.fixture
def sample_catalog():
    """A fresh, mutable copy of the sample catalog."""
    return copy.deepcopy(SAMPLE_CATALOG)


@pytest.fixture
def catalog_file(tmp_path, sample_catalog):
    """The sample catalog written to ``tmp_path/data/llm-pricing.json``."""
    path = tmp_path / "data" / "llm-pricing.json"
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps(sample_catalog, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def report_file(tmp_path):
    return tmp_path / "test-results" / "scraping-report.json"
