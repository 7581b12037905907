class ExtractionError(Exception):
    """Base class for every error an extractor returns to its caller."""
    pass

class InvalidURLError(ExtractionError):
    pass

class NoSiteConfigError(ExtractionError):
    pass

class BrowserLaunchError(ExtractionError):
    pass

class NavigationError(ExtractionError):
    pass

class MediaNotFoundError(ExtractionError):
    """Live capture and every fallback probe came back empty."""

    def __init__(self, media_type: str, site: str):
        self.media_type = media_type
        self.site = site
        super().__init__(f"website not supported (no {media_type} stream found on {site})")

class UnsupportedSiteError(ExtractionError):
    pass

class ConfigError(Exception):
    pass
