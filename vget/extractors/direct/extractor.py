import logging
import posixpath
from typing import Callable, Optional
from urllib.parse import urlparse, unquote, ParseResult

import requests

from vget.core.errors import UnsupportedSiteError
from ..base import BaseExtractor
from ..registry import DIRECT_DOWNLOAD_EXTENSIONS, path_extension
from ..result import Media, VideoFormat

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"

class DirectExtractor(BaseExtractor):
    """
    Fallback extractor.

    A direct file link becomes a single-format Media as-is. Anything else
    (an unknown host's page) is handed to a generic browser extractor.
    """

    name = "direct"

    def __init__(self, page_extractor_factory: Optional[Callable[[], BaseExtractor]] = None,
                 probe: bool = True, timeout: int = 10):
        self.page_extractor_factory = page_extractor_factory
        self.probe = probe
        self.timeout = timeout

    def supports(self, url: ParseResult) -> bool:
        return True

    def extract(self, url: str) -> Media:
        ext = path_extension(urlparse(url).path)
        if ext not in DIRECT_DOWNLOAD_EXTENSIONS:
            if self.page_extractor_factory is None:
                raise UnsupportedSiteError(f"no extractor for {url}")
            return self.page_extractor_factory().extract(url)

        final_url = self._probe_final_url(url) if self.probe else url
        filename = unquote(posixpath.basename(urlparse(final_url).path)) or "download" + ext
        stem = posixpath.splitext(filename)[0] or "download"

        return Media(
            id=stem,
            title=filename,
            formats=[VideoFormat(url=final_url, quality="best", ext=ext.lstrip("."))],
        )

    def _probe_final_url(self, url: str) -> str:
        """Follow redirects with a HEAD request; the original URL is kept on any failure."""
        try:
            with requests.Session() as s:
                resp = s.head(url, headers={"User-Agent": USER_AGENT}, allow_redirects=True, timeout=self.timeout)
            if resp.status_code < 400 and resp.url:
                if resp.url != url:
                    logger.debug(f"{url} redirects to {resp.url}")
                return resp.url
            logger.debug(f"HEAD {url} returned {resp.status_code}, keeping original URL")
        except requests.RequestException as e:
            logger.debug(f"HEAD probe failed for {url}: {e}")
        return url
