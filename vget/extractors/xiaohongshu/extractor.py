from urllib.parse import ParseResult
from vget.core.errors import UnsupportedSiteError
from ..base import BaseExtractor
from ..result import Media

HOSTS = ("xiaohongshu.com", "xhslink.com")

class XiaohongshuExtractor(BaseExtractor):
    """Xiaohongshu media extractor."""

    name = "xiaohongshu"

    def supports(self, url: ParseResult) -> bool:
        # Host matching is done by the registry.
        return True

    def extract(self, url: str) -> Media:
        raise UnsupportedSiteError("Xiaohongshu support coming soon")
