"""llmprice — scheduled scraper that keeps the LLM pricing catalog current.

Public API surface — import submodules directly for full access:
  llmprice.config.providers      — per-provider extraction strategies
  llmprice.config.settings       — paths, timeouts, environment
  llmprice.storage.catalog       — load / validate / atomic save
  llmprice.extraction.extractor  — page → scraped tuples
  llmprice.processing.reconcile  — fuzzy match + price updates
  llmprice.ingestion.orchestrator — full pipeline run
  llmprice.app.cli               — CLI entry point
"""

from .storage.catalog import load_catalog, save_catalog
from .ingestion.orchestrator import run_pipeline, submit_run
from .models import RunConfig, RunReport


def main(argv=None):
    """CLI entry point."""
    from .app.main import main as _main
    return _main(argv)


__all__ = [
    "load_catalog",
    "save_catalog",
    "run_pipeline",
    "submit_run",
    "RunConfig",
    "RunReport",
    "main",
]
