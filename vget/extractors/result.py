from dataclasses import dataclass, field
from typing import Dict, Tuple

@dataclass(frozen=True)
class VideoFormat:
    """
    One fetchable rendition of a media item.

    `headers` must be replayed by whoever performs the transfer; for
    browser-discovered media they carry the Referer/Origin pair the media
    host checks.
    """
    url: str
    quality: str
    ext: str
    headers: Dict[str, str] = field(default_factory=dict)
    audio_url: str = ""
    width: int = 0
    height: int = 0
    bitrate: int = 0

@dataclass(frozen=True)
class Media:
    """
    Unified result contract for all media extractors.

    Describes where the media lives, not the media itself: nothing is
    downloaded during extraction.
    """
    id: str
    title: str
    formats: Tuple[VideoFormat, ...] = ()
    uploader: str = ""
    thumbnail: str = ""

    def __post_init__(self):
        # Accept any sequence but keep the stored value immutable.
        object.__setattr__(self, "formats", tuple(self.formats))

    @property
    def best(self) -> VideoFormat:
        return self.formats[0]
