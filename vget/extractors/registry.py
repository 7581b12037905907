import logging
import posixpath
from typing import Dict, List, Optional
from urllib.parse import urlparse

from .base import BaseExtractor

logger = logging.getLogger(__name__)

# File extensions that skip host-based extractors entirely.
DIRECT_DOWNLOAD_EXTENSIONS = frozenset({
    # Video
    ".mp4", ".webm", ".mov", ".avi", ".mkv", ".flv", ".m3u8", ".ts", ".m4v", ".wmv",
    # Audio
    ".mp3", ".m4a", ".aac", ".ogg", ".wav", ".flac", ".wma",
    # Image
    ".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".svg", ".ico", ".tiff",
    # Documents
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".csv", ".txt", ".rtf",
    # Ebooks
    ".epub", ".mobi", ".azw", ".azw3",
    # Archives
    ".zip", ".tar", ".gz", ".bz2", ".xz", ".rar", ".7z", ".dmg", ".iso",
})

def path_extension(path: str) -> str:
    """Lowercased extension of the last path segment, '' when there is none."""
    return posixpath.splitext(path)[1].lower()

def candidate_hosts(host: str) -> List[str]:
    """
    Hostnames to try, most specific first: the host itself, the host
    without "www.", then each parent domain down to two labels.

    "www.a.example.com" -> ["www.a.example.com", "a.example.com", "example.com"]
    """
    candidates = [host]
    if host.startswith("www."):
        host = host[4:]
        candidates.append(host)
    labels = host.split(".")
    for i in range(1, len(labels) - 1):
        candidates.append(".".join(labels[i:]))
    return candidates

class ExtractorRegistry:
    """
    Registry for managing available media extractors.

    Hostnames map to exactly one extractor. Populate it once at startup,
    before any lookup is served; `match` never mutates it.
    """

    def __init__(self):
        self._by_host: Dict[str, BaseExtractor] = {}
        self._fallback: Optional[BaseExtractor] = None

    def register(self, extractor: BaseExtractor, *hosts: str):
        """Bind the extractor to each hostname. A second binding for a host replaces the first."""
        for host in hosts:
            host = host.lower()
            previous = self._by_host.get(host)
            if previous is not None and previous is not extractor:
                logger.warning(f"Host {host} was bound to {previous.name}, now rebound to {extractor.name}")
            self._by_host[host] = extractor

    def register_fallback(self, extractor: BaseExtractor):
        """Set the extractor for direct file links and unknown hosts."""
        self._fallback = extractor

    @property
    def fallback(self) -> Optional[BaseExtractor]:
        return self._fallback

    def match(self, raw_url: str) -> Optional[BaseExtractor]:
        """
        Find the extractor for a URL.

        Returns None only when the URL cannot be parsed; everything else
        ends at a host extractor or the fallback.
        """
        try:
            u = urlparse(raw_url)
            host = (u.hostname or "").lower()
        except ValueError:
            return None
        if not u.scheme or not host:
            return None

        # A literal file link has nothing to scrape, whatever the host.
        if path_extension(u.path) in DIRECT_DOWNLOAD_EXTENSIONS:
            return self._fallback

        for candidate in candidate_hosts(host):
            extractor = self._by_host.get(candidate)
            if extractor is not None and extractor.supports(u):
                return extractor

        return self._fallback

    def list(self) -> List[BaseExtractor]:
        """All distinct registered extractors, by name, in registration order."""
        seen = set()
        result = []
        for extractor in self._by_host.values():
            if extractor.name not in seen:
                seen.add(extractor.name)
                result.append(extractor)
        return result

    def hosts(self) -> List[str]:
        return sorted(self._by_host)
