"""Builders and fakes shared across test modules."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator
from unittest.mock import AsyncMock

from kvideo.domain.entities.availability import LivenessProbeResult, ProbeFailureReason
from kvideo.domain.entities.catalog import SourceConfig, VideoSummary


def make_source(source_id: str = "custom_0", name: str = "Alpha") -> SourceConfig:
    return SourceConfig(
        id=source_id,
        name=name,
        base_url=f"https://{source_id}.example.com/api.php/provide/vod",
    )


def make_video(
    video_id: str = "1",
    source_id: str = "custom_0",
    url: str = "https://cdn.example.com/v/1/index.m3u8",
    title: str = "Demo",
) -> VideoSummary:
    return VideoSummary(
        id=video_id,
        title=title,
        source_id=source_id,
        play_url=f"Episode 1${url}",
        play_from="m3u8",
    )


def reachable(url: str) -> LivenessProbeResult:
    return LivenessProbeResult(
        url=url, is_reachable=True, status_code=200, elapsed_ms=5, attempts=1
    )


def unreachable(url: str) -> LivenessProbeResult:
    return LivenessProbeResult(
        url=url,
        is_reachable=False,
        reason=ProbeFailureReason.STATUS,
        detail="HTTP 500",
        status_code=500,
        attempts=3,
    )


def probe_by_url(live_urls: set[str]) -> AsyncMock:
    """Mock LivenessProbePort: reachable iff the URL is in *live_urls*."""

    async def _probe(url: str) -> LivenessProbeResult:
        return reachable(url) if url in live_urls else unreachable(url)

    probe = AsyncMock()
    probe.probe = AsyncMock(side_effect=_probe)
    return probe


class _UnlimitedBudget:
    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[None]:
        yield


class FakeProbePool:
    """ProbeConcurrencyPoolPort without limits; records requested caps."""

    def __init__(self) -> None:
        self.requested_caps: list[int | None] = []

    @asynccontextmanager
    async def request(
        self, *, max_in_flight: int | None = None
    ) -> AsyncIterator[_UnlimitedBudget]:
        self.requested_caps.append(max_in_flight)
        yield _UnlimitedBudget()
