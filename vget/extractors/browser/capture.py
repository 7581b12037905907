import asyncio
import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

def page_origin(page_url: str) -> str:
    """scheme://host[:port], never carrying userinfo."""
    u = urlparse(page_url)
    host = u.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    if u.port is not None:
        host = f"{host}:{u.port}"
    return f"{u.scheme}://{host}"

def replay_headers(page_url: str) -> Dict[str, str]:
    """Headers a downstream fetch must send to pass the media host's origin checks."""
    return {"Referer": page_url, "Origin": page_origin(page_url)}

@dataclass(frozen=True)
class CapturedRequest:
    url: str
    headers: Dict[str, str] = field(default_factory=dict)

class OneShotSignal:
    """
    Completion signal that fires at most once.

    Bound to the event loop it was created on; `fire()` may be called from
    that loop or from any other thread. Firing again is a no-op.
    """

    def __init__(self):
        self._loop = asyncio.get_running_loop()
        self._event = asyncio.Event()
        self._lock = threading.Lock()
        self._fired = False

    @property
    def fired(self) -> bool:
        with self._lock:
            return self._fired

    def fire(self) -> bool:
        with self._lock:
            if self._fired:
                return False
            self._fired = True

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            self._event.set()
        elif not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self._event.set)
        return True

    async def wait(self, timeout: float) -> bool:
        """True if the signal fired within `timeout` seconds."""
        try:
            await asyncio.wait_for(self._event.wait(), timeout)
            return True
        except asyncio.TimeoutError:
            return False

class CaptureListener:
    """
    Watches the browser's outbound requests for the first URL carrying the
    target suffix.

    The first match wins. Later matches are counted and dropped, never queued
    and never allowed to replace the first.
    """

    def __init__(self, target_suffix: str, page_url: str):
        self.target_suffix = target_suffix.lower()
        self.page_url = page_url
        self.signal = OneShotSignal()
        self._lock = threading.Lock()
        self._captured: Optional[CapturedRequest] = None
        self.discarded = 0

    def on_request(self, request):
        """Playwright `request` event handler."""
        self.offer(request.url)

    def offer(self, url: str) -> bool:
        # Substring, not suffix: media URLs often carry a query or fragment.
        if self.target_suffix not in url.lower():
            return False

        with self._lock:
            if self._captured is not None:
                self.discarded += 1
                return False
            self._captured = CapturedRequest(url=url, headers=replay_headers(self.page_url))

        logger.debug(f"Captured {url}")
        self.signal.fire()
        return True

    @property
    def captured(self) -> Optional[CapturedRequest]:
        with self._lock:
            return self._captured

    async def wait(self, timeout: float) -> Optional[CapturedRequest]:
        """
        Wait up to `timeout` seconds for a capture.

        Expiry is not an error. The slot is read under the lock afterwards,
        so a capture that lands as the window closes is still returned.
        """
        if not await self.signal.wait(timeout):
            logger.debug(f"No {self.target_suffix} request seen within {timeout}s")
        return self.captured
