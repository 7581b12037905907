"""
Fallback discovery chain.

Run only when live capture saw nothing. Each probe is read-only and cheap
next to the capture window, so they run one after another in a fixed
order and the first non-empty answer wins:

  1. PerformanceProbe - resource-timing entries the page recorded
  2. PlayerProbe      - in-page player objects and <video> elements
  3. SourceProbe      - pattern scan over the rendered HTML

A probe that fails to evaluate, or outlives its time budget, reports no
match.
"""
import asyncio
import logging
import re
from abc import ABC, abstractmethod
from typing import List, Optional

from playwright.async_api import Error as PlaywrightError

from vget.core.config import DEFAULT_PROBE_TIMEOUT

logger = logging.getLogger(__name__)

# Streaming markers worth pulling out of the timeline besides the suffix itself.
STREAM_MARKERS = (".m3u8", ".mpd", ".ts", "hls", "dash")

PERFORMANCE_SCRIPT = """([target, markers]) => {
    return performance.getEntriesByType('resource')
        .map(r => r.name)
        .filter(u => {
            const l = u.toLowerCase();
            return l.includes(target) || markers.some(m => l.includes(m));
        });
}"""

PLAYER_SCRIPT = """(target) => {
    const hit = (src) => typeof src === 'string' && src.toLowerCase().includes(target);
    const read = (obj, key) => {
        try {
            const v = obj[key];
            return typeof v === 'function' ? v.call(obj) : v;
        } catch (e) {
            return '';
        }
    };

    // video.js player registry
    if (window.videojs && typeof window.videojs.getPlayers === 'function') {
        for (const p of Object.values(window.videojs.getPlayers() || {})) {
            const src = p && read(p, 'currentSrc');
            if (hit(src)) return src;
        }
    }

    // markup-based player element exposing its handle
    const vjs = document.querySelector('.video-js');
    if (vjs && vjs.player) {
        const src = read(vjs.player, 'currentSrc');
        if (hit(src)) return src;
    }

    // plain <video> element and nested <source> tags
    const video = document.querySelector('video');
    if (video) {
        if (hit(video.src)) return video.src;
        if (hit(video.currentSrc)) return video.currentSrc;
        for (const source of video.querySelectorAll('source')) {
            if (hit(source.src)) return source.src;
        }
    }

    // global player-like objects
    for (const name of ['player', 'hls']) {
        const obj = window[name];
        if (!obj) continue;
        for (const key of ['src', 'currentSrc', 'url']) {
            const src = read(obj, key);
            if (hit(src)) return src;
        }
    }
    return '';
}"""

class Probe(ABC):
    name = "probe"

    def __init__(self, target_suffix: str):
        self.target_suffix = target_suffix.lower()

    @abstractmethod
    async def find(self, page) -> Optional[str]:
        """Media URL found on the page, or None."""
        pass

    def _hit(self, url) -> bool:
        return isinstance(url, str) and self.target_suffix in url.lower()

class PerformanceProbe(Probe):
    name = "performance"

    async def find(self, page) -> Optional[str]:
        try:
            entries = await page.evaluate(PERFORMANCE_SCRIPT, [self.target_suffix, list(STREAM_MARKERS)])
        except PlaywrightError as e:
            logger.debug(f"Performance timeline unavailable: {e}")
            return None
        for url in entries or []:
            if self._hit(url):
                return url
        return None

class PlayerProbe(Probe):
    name = "player"

    async def find(self, page) -> Optional[str]:
        try:
            src = await page.evaluate(PLAYER_SCRIPT, self.target_suffix)
        except PlaywrightError as e:
            logger.debug(f"Player introspection failed: {e}")
            return None
        if self._hit(src):
            return src.strip()
        return None

class SourceProbe(Probe):
    name = "source"

    def __init__(self, target_suffix: str):
        super().__init__(target_suffix)
        ext = re.escape(self.target_suffix)
        # Best-effort heuristics, most specific first.
        self.patterns = [
            re.compile(rf"https?://[^\"'\s<>]+{ext}[^\"'\s<>]*", re.IGNORECASE),
            re.compile(rf"[\"']([^\"']*{ext}[^\"']*)[\"']", re.IGNORECASE),
            re.compile(rf"src\s*[=:]\s*[\"']([^\"']*{ext}[^\"']*)[\"']", re.IGNORECASE),
            re.compile(r"(?:file|url|source|src)\s*[=:]\s*[\"']([^\"']+)[\"']", re.IGNORECASE),
        ]

    async def find(self, page) -> Optional[str]:
        try:
            html = await page.content()
        except PlaywrightError as e:
            logger.debug(f"Could not read page source: {e}")
            return None
        return self.scan(html)

    def scan(self, html: str) -> Optional[str]:
        if not html:
            return None
        for pattern in self.patterns:
            for m in pattern.finditer(html):
                url = m.group(1) if pattern.groups else m.group(0)
                url = url.strip().replace("\\/", "/")
                if not self._hit(url):
                    continue
                if url.lower().startswith("data:"):
                    continue
                return url
        return None

class FallbackChain:
    def __init__(self, target_suffix: str, probes: Optional[List[Probe]] = None,
                 timeout: float = DEFAULT_PROBE_TIMEOUT):
        self.target_suffix = target_suffix
        self.timeout = timeout
        self.probes = probes if probes is not None else [
            PerformanceProbe(target_suffix),
            PlayerProbe(target_suffix),
            SourceProbe(target_suffix),
        ]
        self.last_probe: Optional[str] = None

    async def run(self, page) -> Optional[str]:
        self.last_probe = None
        for probe in self.probes:
            try:
                url = await asyncio.wait_for(probe.find(page), self.timeout)
            except asyncio.TimeoutError:
                logger.debug(f"{probe.name} probe gave no answer within {self.timeout}s")
                continue
            if url:
                logger.info(f"Found {self.target_suffix} via {probe.name} probe: {url}")
                self.last_probe = probe.name
                return url
        return None
