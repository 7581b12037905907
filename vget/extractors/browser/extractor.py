import asyncio
import logging
from typing import Optional
from urllib.parse import urlparse, ParseResult

from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from vget.core.config import Settings, Site
from vget.core.errors import InvalidURLError, NoSiteConfigError, NavigationError, MediaNotFoundError
from ..base import BaseExtractor
from ..result import Media
from .capture import CaptureListener
from .descriptor import build_media
from .probes import FallbackChain
from .session import BrowserSessionManager

logger = logging.getLogger(__name__)

class BrowserExtractor(BaseExtractor):
    """
    Drives a real browser to the page and watches its network traffic for
    the site's media type.

    Flow per call: launch -> listen -> navigate -> wait for capture (bounded)
    -> fallback probes on a miss -> build the descriptor. The browser is
    closed however the call ends.
    """

    name = "browser"

    def __init__(self, site: Optional[Site], visible: bool = False,
                 settings: Optional[Settings] = None,
                 sessions: Optional[BrowserSessionManager] = None):
        self.site = site
        self.visible = visible
        self.settings = settings or Settings()
        self.sessions = sessions or BrowserSessionManager(self.settings)

    @classmethod
    def generic(cls, visible: bool = False, **kwargs) -> "BrowserExtractor":
        """Browser extractor for unknown sites, hunting HLS playlists."""
        return cls(Site(type="m3u8"), visible=visible, **kwargs)

    def supports(self, url: ParseResult) -> bool:
        # Selection already happened through the site configuration.
        return True

    def extract(self, url: str) -> Media:
        return asyncio.run(self.extract_async(url))

    async def extract_async(self, url: str) -> Media:
        if self.site is None:
            raise NoSiteConfigError("no site configuration provided")

        try:
            parsed = urlparse(url)
            parsed.port  # raises ValueError for a malformed port
        except ValueError as e:
            raise InvalidURLError(f"invalid URL: {url}") from e
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidURLError(f"invalid URL: {url}")

        target = self.site.target_suffix
        logger.info(f"Detecting {self.site.type} stream on {url}")

        async with self.sessions.acquire(headless=not self.visible) as session:
            # Listener goes in before navigation so no early request is missed.
            listener = CaptureListener(target, page_url=url)
            session.context.on("request", listener.on_request)
            page = session.page

            await self._navigate(page, url, listener)

            captured = await listener.wait(self.settings.capture_timeout)
            if captured is not None:
                media_url = captured.url
                source = "capture"
            else:
                logger.info(f"No {target} request captured, trying fallback probes")
                chain = FallbackChain(target, timeout=self.settings.probe_timeout)
                media_url = await chain.run(page)
                source = chain.last_probe

            if not media_url:
                raise MediaNotFoundError(self.site.type, parsed.hostname or parsed.netloc)

            logger.info(f"Found {media_url} via {source}")
            return await build_media(page, url, media_url, self.site.type)

    async def _navigate(self, page, url: str, listener: CaptureListener):
        try:
            await page.goto(url, wait_until="load", timeout=self.settings.navigation_timeout * 1000)
        except PlaywrightTimeoutError:
            # Slow pages still tend to have started their media requests.
            logger.debug(f"Page load timed out after {self.settings.navigation_timeout}s, continuing")
        except PlaywrightError as e:
            if listener.captured is not None:
                logger.debug(f"Ignoring navigation error after capture: {e}")
                return
            raise NavigationError(f"failed to navigate to {url}: {e}") from e
