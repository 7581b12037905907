from urllib.parse import ParseResult
from vget.core.errors import UnsupportedSiteError
from ..base import BaseExtractor
from ..result import Media

HOSTS = ("tiktok.com", "vm.tiktok.com")

class TikTokExtractor(BaseExtractor):
    """TikTok media extractor."""

    name = "tiktok"

    def supports(self, url: ParseResult) -> bool:
        host = (url.hostname or "").lower()
        return host in HOSTS or host == "www.tiktok.com"

    def extract(self, url: str) -> Media:
        raise UnsupportedSiteError("TikTok support coming soon")
