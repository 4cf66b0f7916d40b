"""Tests for episode blob parsing and URL checks."""

from __future__ import annotations

import pytest

from kvideo.domain.entities.catalog import ParseStatus, VideoSummary
from kvideo.domain.playback import (
    first_playable_url,
    is_manifest_url,
    is_valid_url_format,
    parse_play_url,
)


class TestIsValidUrlFormat:
    @pytest.mark.parametrize(
        "url",
        [
            "https://cdn.example.com/a.m3u8",
            "http://1.2.3.4:8080/video.mp4",
        ],
    )
    def test_http_urls_are_valid(self, url: str) -> None:
        assert is_valid_url_format(url) is True

    @pytest.mark.parametrize(
        "url",
        ["", None, "not a url", "ftp://host/file", "https://", "javascript:alert(1)"],
    )
    def test_malformed_urls_are_invalid(self, url: str | None) -> None:
        assert is_valid_url_format(url) is False


class TestIsManifestUrl:
    def test_m3u8_suffix(self) -> None:
        assert is_manifest_url("https://cdn/x/index.m3u8") is True

    def test_case_insensitive(self) -> None:
        assert is_manifest_url("https://cdn/x/INDEX.M3U8?t=1") is True

    def test_mp4_is_not_manifest(self) -> None:
        assert is_manifest_url("https://cdn/x/video.mp4") is False


class TestParsePlayUrl:
    def test_empty_blob(self) -> None:
        parsed = parse_play_url("")
        assert parsed.status is ParseStatus.EMPTY
        assert parsed.episodes == ()

    def test_none_blob(self) -> None:
        assert parse_play_url(None).status is ParseStatus.EMPTY

    def test_single_group(self) -> None:
        parsed = parse_play_url("第1集$https://a/1.m3u8#第2集$https://a/2.m3u8")
        assert parsed.status is ParseStatus.SUCCESS
        assert [ep.name for ep in parsed.episodes] == ["第1集", "第2集"]
        assert [ep.url for ep in parsed.episodes] == [
            "https://a/1.m3u8",
            "https://a/2.m3u8",
        ]
        assert [ep.index for ep in parsed.episodes] == [0, 1]

    def test_bare_url_gets_default_name(self) -> None:
        parsed = parse_play_url("https://a/movie.mp4")
        assert len(parsed.episodes) == 1
        assert parsed.episodes[0].name == "Episode 1"
        assert parsed.episodes[0].url == "https://a/movie.mp4"

    def test_empty_url_segment_is_skipped(self) -> None:
        parsed = parse_play_url("Ep1$https://a/1.m3u8#Ep2$#Ep3$https://a/3.m3u8")
        assert parsed.status is ParseStatus.PARTIAL
        assert parsed.skipped == 1
        assert [ep.name for ep in parsed.episodes] == ["Ep1", "Ep3"]
        # Indices stay contiguous over kept episodes
        assert [ep.index for ep in parsed.episodes] == [0, 1]

    def test_extra_fields_after_url_are_ignored(self) -> None:
        parsed = parse_play_url(
            "EP1$https://cdn.example.com/1.m3u8$hls#EP2$https://cdn.example.com/2.m3u8$$hls"
        )
        assert parsed.status is ParseStatus.SUCCESS
        assert [ep.url for ep in parsed.episodes] == [
            "https://cdn.example.com/1.m3u8",
            "https://cdn.example.com/2.m3u8",
        ]

    def test_trailing_separator_is_not_malformed(self) -> None:
        parsed = parse_play_url("Ep1$https://a/1.m3u8#")
        assert parsed.status is ParseStatus.SUCCESS
        assert parsed.skipped == 0

    def test_bare_garbage_is_skipped(self) -> None:
        parsed = parse_play_url("garbage#Ep1$https://a/1.m3u8")
        assert parsed.skipped == 1
        assert len(parsed.episodes) == 1

    def test_prefers_m3u8_group_by_label(self) -> None:
        blob = "Ep1$https://embed/1$$$Ep1$https://cdn/1"
        parsed = parse_play_url(blob, "embed$$$m3u8")
        assert parsed.group == "m3u8"
        assert parsed.episodes[0].url == "https://cdn/1"

    def test_prefers_m3u8_group_by_url(self) -> None:
        blob = "Ep1$https://embed/1.html$$$Ep1$https://cdn/1.m3u8"
        parsed = parse_play_url(blob)
        assert parsed.episodes[0].url == "https://cdn/1.m3u8"

    def test_falls_back_to_first_non_empty_group(self) -> None:
        blob = "$$$Ep1$https://embed/1.html$$$Ep1$https://other/1.html"
        parsed = parse_play_url(blob)
        assert parsed.episodes[0].url == "https://embed/1.html"

    def test_all_segments_malformed(self) -> None:
        parsed = parse_play_url("Ep1$#Ep2$")
        assert parsed.status is ParseStatus.EMPTY
        assert parsed.skipped == 2


class TestFirstPlayableUrl:
    def test_returns_first_valid_url(self) -> None:
        video = VideoSummary(
            id="1",
            title="t",
            source_id="s",
            play_url="Ep1$not-a-url#Ep2$https://a/2.m3u8",
        )
        assert first_playable_url(video) == "https://a/2.m3u8"

    def test_no_urls(self) -> None:
        video = VideoSummary(id="1", title="t", source_id="s")
        assert first_playable_url(video) is None
