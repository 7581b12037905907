from urllib.parse import ParseResult
from vget.core.errors import UnsupportedSiteError
from ..base import BaseExtractor
from ..result import Media

HOSTS = ("instagram.com",)

class InstagramExtractor(BaseExtractor):
    """Instagram media extractor."""

    name = "instagram"

    def supports(self, url: ParseResult) -> bool:
        host = (url.hostname or "").lower()
        return host in ("instagram.com", "www.instagram.com")

    def extract(self, url: str) -> Media:
        raise UnsupportedSiteError("Instagram support coming soon")
