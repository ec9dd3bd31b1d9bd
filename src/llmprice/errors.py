"""Error kinds raised by the pricing pipeline.

Catalog, save and browser errors are fatal for a run. Navigation and empty
extraction errors are handled per URL by the pipeline driver.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class LLMPriceError(Exception):
    """Base class for every pipeline error."""


class CatalogError(LLMPriceError):
    def __init__(self, path: Union[str, Path], message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{self.path}: {message}")


class CatalogMissing(CatalogError):
    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__(path, "catalog file not found")


class CatalogMalformed(CatalogError):
    pass


class SaveFailed(CatalogError):
    pass


class NavigationFailed(LLMPriceError):
    def __init__(self, url: str, cause: Optional[BaseException] = None) -> None:
        self.url = url
        self.cause = cause
        text = str(cause).strip() if cause is not None else ""
        if text:
            detail = text.splitlines()[0]
        else:
            detail = type(cause).__name__ if cause is not None else "unknown error"
        super().__init__(f"navigation to {url} failed: {detail}")


class ExtractionEmpty(LLMPriceError):
    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"no models found at {url}")


class BrowserCrashed(LLMPriceError):
    pass


class RunCancelled(LLMPriceError):
    pass
