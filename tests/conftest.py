"""
Test fixtures and Playwright stand-ins.

Nothing here starts a browser: the fakes mimic only the slice of the
Playwright async API the extractors touch.
"""

from contextlib import asynccontextmanager
from types import SimpleNamespace

import pytest

from vget.core.config import Settings


class FakeRequest:
    def __init__(self, url):
        self.url = url


class FakeContext:
    def __init__(self, pages=None):
        self.handlers = {}
        self.pages = list(pages or [])
        self.init_scripts = []
        self.closed = False
        self.close_error = None

    def on(self, event, handler):
        self.handlers.setdefault(event, []).append(handler)

    def emit(self, event, payload):
        for handler in self.handlers.get(event, []):
            handler(payload)

    async def add_init_script(self, script):
        self.init_scripts.append(script)

    async def new_page(self):
        page = FakePage(self)
        self.pages.append(page)
        return page

    async def close(self):
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


class FakePage:
    """
    Emits `requests` on the context's request stream during goto, then
    raises `goto_error` if one is set. `evaluations` maps a script to the
    value (or exception) page.evaluate should produce for it.
    """

    def __init__(self, context, requests=(), title="", html="", evaluations=None, goto_error=None):
        self.context = context
        self.requests = list(requests)
        self._title = title
        self.html = html
        self.evaluations = dict(evaluations or {})
        self.goto_error = goto_error
        self.visited = []
        self.evaluated = []
        self.content_calls = 0

    async def goto(self, url, wait_until=None, timeout=None):
        self.visited.append((url, wait_until, timeout))
        for request_url in self.requests:
            self.context.emit("request", FakeRequest(request_url))
        if self.goto_error is not None:
            raise self.goto_error

    async def evaluate(self, script, arg=None):
        self.evaluated.append((script, arg))
        result = self.evaluations.get(script)
        if isinstance(result, Exception):
            raise result
        return result

    async def title(self):
        if isinstance(self._title, Exception):
            raise self._title
        return self._title

    async def content(self):
        self.content_calls += 1
        if isinstance(self.html, Exception):
            raise self.html
        return self.html


class FakeSessionManager:
    """Stand-in for BrowserSessionManager that hands out one prepared page."""

    def __init__(self, page=None, launch_error=None):
        self.context = page.context if page is not None else FakeContext()
        self.page = page
        self.launch_error = launch_error
        self.headless_calls = []
        self.acquired = 0
        self.released = 0

    @asynccontextmanager
    async def acquire(self, headless=True):
        self.headless_calls.append(headless)
        if self.launch_error is not None:
            raise self.launch_error
        self.acquired += 1
        try:
            yield SimpleNamespace(context=self.context, page=self.page)
        finally:
            self.released += 1


class FakePlaywright:
    def __init__(self, context=None, launch_error=None):
        self.context = context
        self.launch_error = launch_error
        self.launch_options = None
        self.stopped = 0
        self.chromium = self

    async def launch_persistent_context(self, **options):
        self.launch_options = options
        if self.launch_error is not None:
            raise self.launch_error
        return self.context

    async def stop(self):
        self.stopped += 1


class FakePlaywrightFactory:
    """Mimics `async_playwright`: calling it returns an object with `start()`."""

    def __init__(self, playwright, start_error=None):
        self.playwright = playwright
        self.start_error = start_error

    def __call__(self):
        return self

    async def start(self):
        if self.start_error is not None:
            raise self.start_error
        return self.playwright


@pytest.fixture
def settings(tmp_path):
    return Settings(
        config_dir=tmp_path / "config",
        capture_timeout=0.05,
        navigation_timeout=1.0,
        probe_timeout=0.2,
        sites_file=tmp_path / "sites.json",
    )


@pytest.fixture
def context():
    return FakeContext()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep host configuration out of the tests."""
    for name in ("VGET_CONFIG_DIR", "VGET_BROWSER_PATH", "VGET_CAPTURE_TIMEOUT",
                 "VGET_NAVIGATION_TIMEOUT", "VGET_PROBE_TIMEOUT", "VGET_SITES_FILE", "HTTPS_PROXY", "HTTP_PROXY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
