import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[3]
DATA_DIR = BASE_DIR / "data"
RESULTS_DIR = BASE_DIR / "test-results"
LOG_DIR = BASE_DIR / "logs"

CATALOG_FILE = DATA_DIR / "llm-pricing.json"
REPORT_FILE = RESULTS_DIR / "scraping-report.json"

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
VIEWPORT = {"width": 1920, "height": 1080}

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]

WAIT_UNTIL_CHOICES = ("domcontentloaded", "networkidle")

LAUNCH_TIMEOUT_MS = 10_000
LAUNCH_RETRIES = 2
NAVIGATION_TIMEOUT_MS = 30_000
SELECTOR_TIMEOUT_MS = 10_000

# Output price estimate when a page exposes only the input price.
SYNTHESIS_FACTOR_DEFAULT = 4


def env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def env_path(name: str, default: Path) -> Path:
    raw = os.environ.get(name, "").strip()
    return Path(raw) if raw else default


def env_providers() -> str:
    """Raw ``PROVIDERS`` selection; ``all`` when unset."""
    return os.environ.get("PROVIDERS", "").strip() or "all"


def env_wait_until() -> str:
    value = os.environ.get("LLMPRICE_WAIT_UNTIL", "").strip().lower()
    return value if value in WAIT_UNTIL_CHOICES else WAIT_UNTIL_CHOICES[0]


def env_log_level(default: str = "INFO") -> str:
    """``LLMPRICE_LOG_LEVEL`` (console only); unknown names fall back."""
    value = os.environ.get("LLMPRICE_LOG_LEVEL", "").strip().upper()
    return value if value in ("DEBUG", "INFO", "WARNING", "ERROR") else default
