"""Browser manager: one Playwright page per analyzed surface."""

import logging
import subprocess
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import Browser, Error as PlaywrightError, Page, Playwright, async_playwright

from pagegen.utils.config import Settings

logger = logging.getLogger(__name__)


class BrowserManager:
    """Owns the Playwright driver and hands out short-lived surface sessions."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def initialize(self) -> None:
        """Start Playwright and launch the browser."""
        if self._playwright is None:
            self._playwright = await async_playwright().start()
            logger.info("Playwright initialized")

        if self._browser is None:
            self._browser = await self._launch()

    async def _launch(self) -> Browser:
        try:
            return await self._playwright.chromium.launch(headless=self.settings.BROWSER_HEADLESS)
        except PlaywrightError as e:
            if "Executable doesn't exist" not in str(e):
                raise
            logger.warning("Playwright browsers not found, installing chromium...")
            self._install_browsers()
            return await self._playwright.chromium.launch(headless=self.settings.BROWSER_HEADLESS)

    @staticmethod
    def _install_browsers() -> None:
        cmd = [sys.executable, "-m", "playwright", "install", "chromium"]
        logger.info(f"Running: {' '.join(cmd)}")
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=300)
        if result.returncode != 0:
            raise RuntimeError(
                "Failed to install Playwright browsers automatically. "
                f"Please run manually: python -m playwright install chromium ({result.stderr.strip()})"
            )
        logger.info("Playwright browsers installed successfully")

    @asynccontextmanager
    async def open_surface(self, url: str) -> AsyncIterator[Page]:
        """
        Open a fresh context, navigate to ``url`` and wait for the network
        to settle. The context is closed on every exit path.
        """
        await self.initialize()

        context = await self._browser.new_context(
            viewport={"width": self.settings.VIEWPORT_WIDTH, "height": self.settings.VIEWPORT_HEIGHT},
            ignore_https_errors=True,
        )
        try:
            page = await context.new_page()
            page.set_default_navigation_timeout(self.settings.NAVIGATION_TIMEOUT_MS)
            logger.info(f"Navigating to {url}")
            await page.goto(url)
            await page.wait_for_load_state("networkidle")
            yield page
        finally:
            await context.close()
            logger.debug(f"Closed browser context for {url}")

    async def close(self) -> None:
        """Close the browser and stop Playwright."""
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
            logger.info("Playwright stopped")

    async def __aenter__(self) -> "BrowserManager":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
