"""Tests for the fallback discovery chain."""

import asyncio

import pytest
from playwright.async_api import Error as PlaywrightError

from vget.extractors.browser.probes import (
    PERFORMANCE_SCRIPT,
    PLAYER_SCRIPT,
    FallbackChain,
    PerformanceProbe,
    PlayerProbe,
    Probe,
    SourceProbe,
)

from conftest import FakeContext, FakePage


def make_page(**kwargs):
    return FakePage(FakeContext(), **kwargs)


class TestPerformanceProbe:
    def test_returns_first_entry_with_suffix(self) -> None:
        page = make_page(evaluations={PERFORMANCE_SCRIPT: [
            "https://cdn.x.com/seg1.ts",
            "https://cdn.x.com/hls/master.m3u8?sig=1",
            "https://cdn.x.com/hls/other.m3u8",
        ]})
        assert asyncio.run(PerformanceProbe(".m3u8").find(page)) == "https://cdn.x.com/hls/master.m3u8?sig=1"

    def test_passes_suffix_into_page(self) -> None:
        page = make_page(evaluations={PERFORMANCE_SCRIPT: []})
        asyncio.run(PerformanceProbe(".MP4").find(page))
        script, arg = page.evaluated[0]
        assert script == PERFORMANCE_SCRIPT
        assert arg[0] == ".mp4"

    def test_streaming_markers_alone_are_not_a_match(self) -> None:
        page = make_page(evaluations={PERFORMANCE_SCRIPT: ["https://cdn.x.com/hls/seg1.ts"]})
        assert asyncio.run(PerformanceProbe(".m3u8").find(page)) is None

    def test_evaluation_error_is_no_match(self) -> None:
        page = make_page(evaluations={PERFORMANCE_SCRIPT: PlaywrightError("context destroyed")})
        assert asyncio.run(PerformanceProbe(".m3u8").find(page)) is None


class TestPlayerProbe:
    def test_returns_player_source(self) -> None:
        page = make_page(evaluations={PLAYER_SCRIPT: "https://cdn.x.com/final.m3u8"})
        assert asyncio.run(PlayerProbe(".m3u8").find(page)) == "https://cdn.x.com/final.m3u8"

    @pytest.mark.parametrize("value", ["", None, "blob:https://site.com/abc", 42])
    def test_empty_or_foreign_values_are_no_match(self, value) -> None:
        page = make_page(evaluations={PLAYER_SCRIPT: value})
        assert asyncio.run(PlayerProbe(".m3u8").find(page)) is None

    def test_evaluation_error_is_no_match(self) -> None:
        page = make_page(evaluations={PLAYER_SCRIPT: PlaywrightError("boom")})
        assert asyncio.run(PlayerProbe(".m3u8").find(page)) is None


class TestSourceProbe:
    def test_absolute_url(self) -> None:
        html = '<script>var cfg = {a: 1}; var stream = "https://cdn.x.com/live/index.m3u8?t=9";</script>'
        assert SourceProbe(".m3u8").scan(html) == "https://cdn.x.com/live/index.m3u8?t=9"

    def test_quoted_relative_literal(self) -> None:
        html = "<script>player.load('/streams/abc.m3u8')</script>"
        assert SourceProbe(".m3u8").scan(html) == "/streams/abc.m3u8"

    def test_absolute_pattern_wins_over_quoted(self) -> None:
        html = "<script>a('/rel/one.m3u8'); b = \"https://cdn.x.com/two.m3u8\"</script>"
        assert SourceProbe(".m3u8").scan(html) == "https://cdn.x.com/two.m3u8"

    def test_json_escaped_slashes(self) -> None:
        html = '{"file":"https:\\/\\/cdn.x.com\\/v\\/clip.mp4"}'
        assert SourceProbe(".mp4").scan(html) == "https://cdn.x.com/v/clip.mp4"

    def test_data_uri_is_rejected(self) -> None:
        html = "<video src='data:video/mp4;base64,AAAA.mp4'></video>"
        assert SourceProbe(".mp4").scan(html) is None

    def test_generic_assignment_needs_suffix(self) -> None:
        html = "<script>file: 'https://cdn.x.com/poster.jpg'</script>"
        assert SourceProbe(".m3u8").scan(html) is None

    def test_empty_html(self) -> None:
        assert SourceProbe(".m3u8").scan("") is None

    def test_content_error_is_no_match(self) -> None:
        page = make_page(html=PlaywrightError("page closed"))
        assert asyncio.run(SourceProbe(".m3u8").find(page)) is None


class RecordingProbe:
    def __init__(self, name, result, calls):
        self.name = name
        self.result = result
        self.calls = calls

    async def find(self, page):
        self.calls.append(self.name)
        return self.result


class TestFallbackChain:
    def test_default_order(self) -> None:
        chain = FallbackChain(".m3u8")
        assert [p.name for p in chain.probes] == ["performance", "player", "source"]

    def test_short_circuits_on_first_hit(self) -> None:
        calls = []
        chain = FallbackChain(".m3u8", probes=[
            RecordingProbe("performance", None, calls),
            RecordingProbe("player", "https://cdn.x.com/final.m3u8", calls),
            RecordingProbe("source", "https://cdn.x.com/never.m3u8", calls),
        ])
        assert asyncio.run(chain.run(page=None)) == "https://cdn.x.com/final.m3u8"
        assert calls == ["performance", "player"]
        assert chain.last_probe == "player"

    def test_all_empty(self) -> None:
        calls = []
        chain = FallbackChain(".m3u8", probes=[
            RecordingProbe("performance", None, calls),
            RecordingProbe("player", "", calls),
            RecordingProbe("source", None, calls),
        ])
        assert asyncio.run(chain.run(page=None)) is None
        assert calls == ["performance", "player", "source"]
        assert chain.last_probe is None

    def test_scenario_d_player_hit_skips_source_scan(self) -> None:
        page = make_page(
            evaluations={
                PERFORMANCE_SCRIPT: [],
                PLAYER_SCRIPT: "https://cdn.x.com/final.m3u8",
            },
            html="<script>var u = 'https://cdn.x.com/other.m3u8'</script>",
        )
        assert asyncio.run(FallbackChain(".m3u8").run(page)) == "https://cdn.x.com/final.m3u8"
        assert page.content_calls == 0
        assert [script for script, _ in page.evaluated] == [PERFORMANCE_SCRIPT, PLAYER_SCRIPT]


class StalledPage(FakePage):
    """A page whose scripts never settle."""

    async def evaluate(self, script, arg=None):
        self.evaluated.append((script, arg))
        await asyncio.Event().wait()


class TestTimeBudget:
    def test_stalled_scripts_fall_through_to_source_scan(self) -> None:
        page = StalledPage(FakeContext(), html="<script>src: 'https://cdn.x.com/live/index.m3u8'</script>")
        chain = FallbackChain(".m3u8", timeout=0.05)

        url = asyncio.run(asyncio.wait_for(chain.run(page), 2))

        assert url == "https://cdn.x.com/live/index.m3u8"
        assert chain.last_probe == "source"
        assert len(page.evaluated) == 2

    def test_chain_terminates_when_every_probe_stalls(self) -> None:
        class StalledProbe(Probe):
            name = "stalled"

            async def find(self, page):
                await asyncio.Event().wait()

        chain = FallbackChain(".m3u8", probes=[StalledProbe(".m3u8"), StalledProbe(".m3u8")], timeout=0.05)
        assert asyncio.run(asyncio.wait_for(chain.run(page=None), 2)) is None
        assert chain.last_probe is None


def test_base_class_requires_find() -> None:
    with pytest.raises(TypeError):
        Probe(".m3u8")
