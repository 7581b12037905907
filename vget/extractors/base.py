from abc import ABC, abstractmethod
from urllib.parse import ParseResult
from .result import Media

class BaseExtractor(ABC):
    """
    Abstract base class for all media extractors.

    This class defines the interface that site-specific extractors
    (YouTube, TikTok, the browser extractor, etc.) must implement.

    CRITICAL BOUNDARIES:
    - Extractors ONLY locate media and fetch metadata.
    - Extractors do NOT download file content.
    - Extractors do NOT retry or cache; every call starts fresh.
    """

    name = "base"

    @abstractmethod
    def supports(self, url: ParseResult) -> bool:
        """
        Path-level refinement, called after the registry matched the host.

        Args:
            url: The already parsed URL.

        Returns:
            True if this extractor wants the URL, False otherwise.
        """
        pass

    @abstractmethod
    def extract(self, url: str) -> Media:
        """
        Resolve the page URL into a Media descriptor.

        Args:
            url: The URL to extract from.

        Returns:
            Media: Unified extraction result.

        Raises:
            ExtractionError: When the media cannot be located.
        """
        pass

    def __repr__(self):
        return f"<{type(self).__name__} name={self.name!r}>"
