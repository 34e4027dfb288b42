"""Playwright browser lifecycle manager.

One Chromium process is shared by the whole service and started lazily on
the first booking. Every booking gets a fresh browser context so cookies and
storage never leak between attempts.
"""

import asyncio
import logging

from playwright.async_api import Browser, BrowserContext, Playwright, async_playwright
from playwright_stealth import Stealth

from amcmcp.config import settings

logger = logging.getLogger(__name__)

_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]


class BrowserManager:
    """Owns the shared Playwright browser.

    Usage::

        manager = BrowserManager()
        context = await manager.new_context()
        page = await context.new_page()
        ...
        await page.close()
        await context.close()
        await manager.shutdown()  # service shutdown only
    """

    def __init__(self, headless: bool | None = None, slow_mo: int | None = None) -> None:
        self.headless = settings.amc_test_headless if headless is None else headless
        self.slow_mo = settings.amc_test_slow_mo if slow_mo is None else slow_mo
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._stealth = Stealth()
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._browser is not None

    async def _ensure_browser(self) -> Browser:
        async with self._lock:
            if self._browser is None:
                self._playwright = await async_playwright().start()
                self._browser = await self._playwright.chromium.launch(
                    headless=self.headless,
                    slow_mo=self.slow_mo,
                    args=LAUNCH_ARGS,
                )
                mode = "headless" if self.headless else "visible"
                logger.info(f"Playwright browser launched ({mode}, slow_mo={self.slow_mo}ms)")
            return self._browser

    async def new_context(self) -> BrowserContext:
        """Open an isolated browser context for one booking attempt."""
        browser = await self._ensure_browser()
        context = await browser.new_context(
            user_agent=_UA,
            viewport={"width": 1280, "height": 720},
            locale="en-US",
        )
        await self._stealth.apply_stealth_async(context)
        return context

    async def shutdown(self) -> None:
        """Close the browser. Called at service shutdown."""
        if self._browser:
            await self._browser.close()
            self._browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

        logger.info("Playwright browser shut down")
