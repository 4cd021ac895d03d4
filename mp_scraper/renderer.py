"""
renderer.py — Headless Chromium page renderer built on Playwright.

Usage:
    from mp_scraper.renderer import RenderSession
    async with RenderSession() as session:
        html = await session.render(url)

Each RenderSession owns one full Chromium process. It is created per request,
reused for the (at most two) sequential navigations of that request, and torn
down on every exit path of the `async with` block.
"""

import logging

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from mp_scraper import config

logger = logging.getLogger("mp_scraper.renderer")


class RenderFailure(RuntimeError):
    """Navigation or browser failure while rendering a page."""

    def __init__(self, url: str, cause: BaseException):
        super().__init__(f"Failed to render {url}: {cause}")
        self.url = url
        self.cause = cause


class RenderSession:
    """One Chromium instance with a single page, driven through Playwright."""

    def __init__(
        self,
        headless: bool | None = None,
        user_agent: str | None = None,
        timeout_ms: int | None = None,
    ):
        self.headless = config.HEADLESS if headless is None else headless
        self.user_agent = user_agent or config.USER_AGENT
        self.timeout_ms = timeout_ms or config.NAVIGATION_TIMEOUT_MS
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    # ── Lifecycle ────────────────────────────────────────────
    async def __aenter__(self) -> "RenderSession":
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=config.BROWSER_ARGS,
            )
            self._context = await self._browser.new_context(user_agent=self.user_agent)
            self._page = await self._context.new_page()
        except PlaywrightError as e:
            # __aexit__ is not called when __aenter__ raises
            await self.close()
            raise RenderFailure("about:blank", e) from e
        except BaseException:
            await self.close()
            raise
        logger.debug("Browser launched (headless=%s)", self.headless)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close context, browser and driver. Failures are logged, never raised."""
        if self._context is not None:
            try:
                await self._context.close()
            except Exception as e:
                logger.warning("Could not close browser context: %s", e)
            self._context = None
            self._page = None

        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning("Could not close browser: %s", e)
            self._browser = None

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning("Could not stop Playwright driver: %s", e)
            self._playwright = None

    # ── Rendering ────────────────────────────────────────────
    async def render(self, url: str) -> str:
        """
        Navigate to `url`, wait until the network is idle and return the
        serialized DOM.

        The attachment grids are filled by XHR after the load event, so the
        wait is `networkidle` (no open connections for 500 ms) bounded by
        the configured hard timeout.

        Raises:
            RenderFailure: on DNS errors, timeouts or a crashed page.
        """
        if self._page is None:
            raise RuntimeError("RenderSession is not open — use 'async with RenderSession()'")

        logger.info("Navigating to: %s", url)
        try:
            await self._page.goto(url, wait_until="networkidle", timeout=self.timeout_ms)
            html = await self._page.content()
        except PlaywrightError as e:
            raise RenderFailure(url, e) from e

        logger.debug("Rendered %s (%d chars)", url, len(html))
        return html
