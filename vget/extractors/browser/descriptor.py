import logging
import posixpath
from urllib.parse import urlparse

from playwright.async_api import Error as PlaywrightError

from ..result import Media, VideoFormat
from .capture import replay_headers

logger = logging.getLogger(__name__)

DEFAULT_ID = "video"

def _last_segment(path: str) -> str:
    return posixpath.basename(path.rstrip("/"))

def derive_id(media_url: str) -> str:
    """Media file name without its extension, or the placeholder."""
    name = _last_segment(urlparse(media_url).path)
    stem, _ = posixpath.splitext(name)
    # splitext keeps dotfiles whole, so ".m3u8" stays ".m3u8"
    return stem or DEFAULT_ID

def fallback_title(page_url: str) -> str:
    u = urlparse(page_url)
    return _last_segment(u.path) or u.hostname or u.netloc

async def page_title(page) -> str:
    try:
        return (await page.title() or "").strip()
    except PlaywrightError as e:
        logger.debug(f"Could not read document title: {e}")
        return ""

async def build_media(page, page_url: str, media_url: str, site_type: str) -> Media:
    title = await page_title(page) or fallback_title(page_url)
    return Media(
        id=derive_id(media_url),
        title=title,
        formats=[
            VideoFormat(
                url=media_url,
                quality="best",
                ext=site_type,
                headers=replay_headers(page_url),
            )
        ],
    )
