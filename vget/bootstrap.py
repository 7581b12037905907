import logging
from typing import Any, Dict, Optional

from vget.core.config import Settings, Site, find_site, load_sites
from vget.core.errors import InvalidURLError
from vget.extractors.base import BaseExtractor
from vget.extractors.browser.extractor import BrowserExtractor
from vget.extractors.browser.session import BrowserSessionManager
from vget.extractors.direct.extractor import DirectExtractor
from vget.extractors.registry import ExtractorRegistry
from vget.extractors.youtube.extractor import YouTubeExtractor, HOSTS as YOUTUBE_HOSTS
from vget.extractors.tiktok.extractor import TikTokExtractor, HOSTS as TIKTOK_HOSTS
from vget.extractors.instagram.extractor import InstagramExtractor, HOSTS as INSTAGRAM_HOSTS
from vget.extractors.xiaohongshu.extractor import XiaohongshuExtractor, HOSTS as XIAOHONGSHU_HOSTS
from vget.extractors.twitter.extractor import TwitterExtractor, HOSTS as TWITTER_HOSTS

logger = logging.getLogger(__name__)

def build_registry(settings: Settings, visible: bool = False,
                   sessions: Optional[BrowserSessionManager] = None) -> ExtractorRegistry:
    """Register every built-in extractor. Called once, before any lookup."""
    sessions = sessions or BrowserSessionManager(settings)
    registry = ExtractorRegistry()
    registry.register(YouTubeExtractor(), *YOUTUBE_HOSTS)
    registry.register(TikTokExtractor(), *TIKTOK_HOSTS)
    registry.register(InstagramExtractor(), *INSTAGRAM_HOSTS)
    registry.register(XiaohongshuExtractor(), *XIAOHONGSHU_HOSTS)
    registry.register(TwitterExtractor(), *TWITTER_HOSTS)
    registry.register_fallback(DirectExtractor(
        page_extractor_factory=lambda: BrowserExtractor.generic(visible=visible, settings=settings, sessions=sessions),
    ))
    return registry

def create_container(settings: Optional[Settings] = None, visible: bool = False) -> Dict[str, Any]:
    settings = settings or Settings.from_env()
    sessions = BrowserSessionManager(settings)
    return {
        "settings": settings,
        "sessions": sessions,
        "sites": load_sites(settings.sites_file),
        "registry": build_registry(settings, visible=visible, sessions=sessions),
    }

def resolve_extractor(container: Dict[str, Any], url: str, visible: bool = False,
                      media_type: Optional[str] = None) -> BaseExtractor:
    """
    Pick the extractor for a URL.

    A configured site (or an explicit media type) forces the browser
    extractor; everything else goes through the registry.
    """
    site = find_site(container["sites"], url)
    if media_type:
        site = Site(type=media_type.lower().lstrip("."), match=site.match if site else "")
    if site is not None:
        logger.debug(f"Using browser extractor for {url} (type={site.type})")
        return BrowserExtractor(site, visible=visible, settings=container["settings"],
                                sessions=container["sessions"])

    extractor = container["registry"].match(url)
    if extractor is None:
        raise InvalidURLError(f"invalid URL: {url}")
    return extractor
