from urllib.parse import ParseResult
from vget.core.errors import UnsupportedSiteError
from ..base import BaseExtractor
from ..result import Media

HOSTS = ("twitter.com", "x.com", "mobile.twitter.com")

class TwitterExtractor(BaseExtractor):
    """Twitter/X media extractor. Only status pages carry media."""

    name = "twitter"

    def supports(self, url: ParseResult) -> bool:
        return "/status/" in url.path

    def extract(self, url: str) -> Media:
        raise UnsupportedSiteError("Twitter/X support coming soon")
