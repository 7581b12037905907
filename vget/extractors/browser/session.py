import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from playwright.async_api import async_playwright, Error as PlaywrightError

from vget.core.config import Settings
from vget.core.errors import BrowserLaunchError

logger = logging.getLogger(__name__)

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-gpu",
    "--disable-dev-shm-usage",
    "--disable-blink-features=AutomationControlled",
    "--no-first-run",
    "--no-default-browser-check",
    "--window-size=1920,1080",
    "--lang=en-US",
]

HIDE_AUTOMATION_SCRIPT = """
Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
"""

class BrowserSession:
    """A launched browser owned by exactly one extraction call."""

    def __init__(self, playwright, context, page):
        self.playwright = playwright
        self.context = context
        self.page = page
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    async def release(self):
        """Close the browser and stop the driver. Safe to call more than once."""
        if self._released:
            return
        self._released = True
        try:
            await self.context.close()
        except PlaywrightError as e:
            logger.debug(f"Browser context already gone: {e}")
        finally:
            await self.playwright.stop()
        logger.debug("[Browser] Closed.")

class BrowserSessionManager:
    """
    Launches an isolated Chromium per extraction call.

    The profile directory persists across calls (cookies, consent banners)
    and is never deleted. Because Chromium locks a profile while it runs,
    calls sharing one manager must not overlap.
    """

    def __init__(self, settings: Settings, playwright_factory=async_playwright):
        self.settings = settings
        self._playwright_factory = playwright_factory

    def launch_options(self, headless: bool) -> Dict[str, Any]:
        options = {
            "user_data_dir": str(self.settings.profile_dir),
            "headless": headless,
            "args": list(LAUNCH_ARGS),
            "ignore_default_args": ["--enable-automation"],
            "viewport": {"width": 1920, "height": 1080},
        }
        # Passed explicitly: the driver does not pick the binary up from
        # ambient environment hints on its own.
        if self.settings.browser_path:
            options["executable_path"] = self.settings.browser_path
        if self.settings.proxy:
            options["proxy"] = {"server": self.settings.proxy}
        return options

    async def launch(self, headless: bool = True) -> BrowserSession:
        self.settings.profile_dir.mkdir(parents=True, exist_ok=True)
        options = self.launch_options(headless)
        logger.info(f"[Browser] Launching Chromium (headless={headless}, profile={options['user_data_dir']})")

        try:
            playwright = await self._playwright_factory().start()
        except PlaywrightError as e:
            raise BrowserLaunchError(f"failed to start browser driver: {e}") from e

        try:
            context = await playwright.chromium.launch_persistent_context(**options)
        except PlaywrightError as e:
            await playwright.stop()
            raise BrowserLaunchError(f"failed to launch browser: {e}") from e

        try:
            await context.add_init_script(HIDE_AUTOMATION_SCRIPT)
            page = context.pages[0] if context.pages else await context.new_page()
        except PlaywrightError as e:
            await BrowserSession(playwright, context, None).release()
            raise BrowserLaunchError(f"failed to open browser page: {e}") from e

        return BrowserSession(playwright, context, page)

    @asynccontextmanager
    async def acquire(self, headless: bool = True):
        """Yield a ready session; it is released on every way out of the block."""
        session = await self.launch(headless)
        try:
            yield session
        finally:
            await session.release()
