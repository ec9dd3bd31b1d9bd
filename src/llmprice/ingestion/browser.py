"""Headless browser session shared by one pipeline run.

One Chromium instance per run; every page gets its own isolated context so
cookies and storage never leak between providers.
"""

from __future__ import annotations

import time
from typing import Dict, List, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from ..config.settings import (
    BROWSER_ARGS,
    LAUNCH_RETRIES,
    LAUNCH_TIMEOUT_MS,
    NAVIGATION_TIMEOUT_MS,
    USER_AGENT,
    VIEWPORT,
    WAIT_UNTIL_CHOICES,
)
from ..errors import BrowserCrashed, NavigationFailed
from ..utils.logging import get_logger

logger = get_logger(__name__)


class BrowserSession:
    def __init__(
        self,
        headless: bool = True,
        user_agent: str = USER_AGENT,
        viewport: Optional[Dict[str, int]] = None,
        launch_timeout_ms: int = LAUNCH_TIMEOUT_MS,
        launch_retries: int = LAUNCH_RETRIES,
        args: Optional[List[str]] = None,
    ) -> None:
        self.headless = headless
        self.user_agent = user_agent
        self.viewport = dict(viewport or VIEWPORT)
        self.launch_timeout_ms = launch_timeout_ms
        self.launch_retries = max(1, launch_retries)
        self.args = list(BROWSER_ARGS if args is None else args)
        self._pw = None
        self._browser = None

    def __enter__(self) -> "BrowserSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    @property
    def started(self) -> bool:
        return self._browser is not None

    def start(self) -> None:
        """Launch Chromium, retrying a cold start that fails or times out."""
        if self._browser is not None:
            return
        last_err: Optional[BaseException] = None
        for attempt in range(1, self.launch_retries + 1):
            try:
                if self._pw is None:
                    self._pw = sync_playwright().start()
                self._browser = self._pw.chromium.launch(
                    headless=self.headless,
                    args=self.args,
                    timeout=self.launch_timeout_ms,
                )
                logger.debug("Browser launched (attempt %d)", attempt)
                return
            except PlaywrightError as exc:
                last_err = exc
                logger.warning("Browser launch failed (attempt %d/%d): %s", attempt, self.launch_retries, exc)
                if attempt < self.launch_retries:
                    time.sleep(2 ** (attempt - 1))
        self.shutdown()
        raise BrowserCrashed(f"browser could not be launched: {last_err}")

    def _ensure_alive(self) -> None:
        if self._browser is None:
            self.start()
        if not self._browser.is_connected():
            raise BrowserCrashed("browser disconnected")

    def acquire_page(
        self,
        url: str,
        wait_until: str = "domcontentloaded",
        timeout_ms: int = NAVIGATION_TIMEOUT_MS,
    ):
        """Open a fresh context + page and navigate to ``url``."""
        if wait_until not in WAIT_UNTIL_CHOICES:
            raise ValueError(f"wait_until must be one of {WAIT_UNTIL_CHOICES}, got {wait_until!r}")
        self._ensure_alive()

        try:
            context = self._browser.new_context(user_agent=self.user_agent, viewport=self.viewport)
        except PlaywrightError as exc:
            raise BrowserCrashed(f"could not open browser context: {exc}") from exc

        try:
            page = context.new_page()
            page.goto(url, wait_until=wait_until, timeout=timeout_ms)
        except PlaywrightError as exc:
            self._close_context(context)
            if not self._browser.is_connected():
                raise BrowserCrashed(f"browser died while loading {url}: {exc}") from exc
            raise NavigationFailed(url, exc) from exc
        return page

    def release_page(self, page) -> None:
        """Close the page's context; the browser stays up."""
        if page is None:
            return
        self._close_context(page.context)

    @staticmethod
    def _close_context(context) -> None:
        try:
            context.close()
        except PlaywrightError as exc:
            logger.debug("Context close failed: %s", exc)

    def shutdown(self) -> None:
        if self._browser is not None:
            try:
                self._browser.close()
            except PlaywrightError as exc:
                logger.debug("Browser close failed: %s", exc)
        if self._pw is not None:
            try:
                self._pw.stop()
            except PlaywrightError as exc:
                logger.debug("Playwright stop failed: %s", exc)
        self._browser = None
        self._pw = None
