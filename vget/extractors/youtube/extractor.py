import logging
from typing import Any, Dict, List
from urllib.parse import ParseResult

from vget.core.errors import ExtractionError
from ..base import BaseExtractor
from ..result import Media, VideoFormat

logger = logging.getLogger(__name__)

HOSTS = ("youtube.com", "www.youtube.com", "youtu.be", "m.youtube.com", "music.youtube.com")

class YouTubeExtractor(BaseExtractor):
    """YouTube media extractor backed by yt-dlp."""

    name = "youtube"

    def supports(self, url: ParseResult) -> bool:
        return (url.hostname or "").lower() in HOSTS

    def extract(self, url: str) -> Media:
        import yt_dlp

        ydl_opts = {
            'quiet': True,
            'no_warnings': True,
            'skip_download': True,
            'noplaylist': True,
        }

        try:
            with yt_dlp.YoutubeDL(ydl_opts) as ydl:
                # Resolve metadata ONLY
                info = ydl.extract_info(url, download=False)
        except yt_dlp.utils.DownloadError as e:
            raise ExtractionError(f"failed to extract YouTube video: {e}") from e

        return self.to_media(info)

    @staticmethod
    def to_media(info: Dict[str, Any]) -> Media:
        formats: List[VideoFormat] = []
        for f in info.get('formats') or []:
            # Skip formats without URL (storyboards, DRM placeholders)
            if not f.get('url'):
                continue

            height = int(f.get('height') or 0)
            quality = f"{height}p" if height > 0 else str(f.get('format_id') or "")
            tbr = f.get('tbr') or 0

            formats.append(VideoFormat(
                url=f['url'],
                quality=quality,
                ext=f.get('ext') or "",
                headers=dict(f.get('http_headers') or {}),
                width=int(f.get('width') or 0),
                height=height,
                bitrate=int(tbr * 1000) if tbr > 0 else 0,
            ))

        logger.debug(f"yt-dlp returned {len(formats)} usable format(s) for {info.get('id')}")
        return Media(
            id=info.get('id') or "",
            title=info.get('title') or "",
            formats=formats,
            uploader=info.get('uploader') or "",
            thumbnail=info.get('thumbnail') or "",
        )
