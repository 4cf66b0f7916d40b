"""Per-request source availability check.

A source is judged by probing the first playable URL of up to three of
the videos it just returned.  Samples within one source are probed one
after another and probing stops as soon as the verdict policy is
satisfied; different sources are checked fully in parallel.

The verdict is probabilistic: a source whose samples work may still
carry dead videos, and it is recomputed on every search.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence

import structlog

from kvideo.application.validation.policies import (
    SourceVerdictPolicy,
    short_circuit_on_first_reachable,
)
from kvideo.domain.entities.availability import (
    LivenessProbeResult,
    SourceAvailabilityResult,
    SourceSample,
)
from kvideo.domain.entities.catalog import VideoSummary
from kvideo.domain.playback import first_playable_url
from kvideo.domain.ports.liveness_probe import LivenessProbePort

log = structlog.get_logger(__name__)

ERROR_NO_VIDEOS = "No videos found"
ERROR_ALL_SAMPLES_FAILED = "All sample videos failed to load"


def _now_ms() -> int:
    return int(time.time() * 1000)


class _VerdictCacheEntry:
    """Time-bounded cache entry for an unavailable verdict."""

    __slots__ = ("result", "expires_at")

    def __init__(self, result: SourceAvailabilityResult, ttl: float) -> None:
        self.result = result
        self.expires_at = time.monotonic() + ttl

    @property
    def is_expired(self) -> bool:
        return time.monotonic() >= self.expires_at


class SourceAvailabilityChecker:
    """Decides per search whether each source is currently serving media.

    Args:
        probe: Liveness probe used for every sample URL.
        max_samples: Videos sampled per source (default: 3).
        verdict_policy: Called after each probe with the results so far;
            True declares the source available.
        unavailable_ttl_seconds: Seconds to remember an *unavailable*
            verdict (0 disables), keyed by source and sampled URLs.
            Available verdicts are never cached, so a source that just
            went down is always re-probed.
    """

    def __init__(
        self,
        *,
        probe: LivenessProbePort,
        max_samples: int = 3,
        verdict_policy: SourceVerdictPolicy = short_circuit_on_first_reachable,
        unavailable_ttl_seconds: float = 0.0,
    ) -> None:
        self._probe = probe
        self._max_samples = max_samples
        self._verdict_policy = verdict_policy
        self._unavailable_ttl = unavailable_ttl_seconds
        self._cache: dict[tuple[str, tuple[str, ...]], _VerdictCacheEntry] = {}

    async def check_source(self, sample: SourceSample) -> SourceAvailabilityResult:
        """Check a single source against its sample videos."""
        start = time.perf_counter()

        if not sample.videos:
            return SourceAvailabilityResult(
                source_id=sample.source_id,
                source_name=sample.source_name,
                is_available=False,
                error=ERROR_NO_VIDEOS,
                checked_at=_now_ms(),
            )

        candidates: list[tuple[str, str]] = []
        for video in sample.videos[: self._max_samples]:
            url = first_playable_url(video)
            if url is not None:
                candidates.append((video.id, url))

        # A verdict only speaks for the URLs it sampled
        cache_key = (sample.source_id, tuple(url for _, url in candidates))
        cached = self._cache.get(cache_key)
        if cached is not None:
            if not cached.is_expired:
                log.debug("source_verdict_cached", source=sample.source_id)
                return cached.result
            del self._cache[cache_key]

        results: list[LivenessProbeResult] = []
        for video_id, url in candidates:
            log.debug(
                "source_check_probe",
                source=sample.source_id,
                video_id=video_id,
                url=url[:80],
            )
            results.append(await self._probe.probe(url))

            if self._verdict_policy(results):
                sample_url = next((r.url for r in results if r.is_reachable), None)
                log.info(
                    "source_available",
                    source=sample.source_id,
                    name=sample.source_name,
                    probes=len(results),
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                )
                return SourceAvailabilityResult(
                    source_id=sample.source_id,
                    source_name=sample.source_name,
                    is_available=True,
                    sample_url=sample_url,
                    checked_at=_now_ms(),
                )

        log.info(
            "source_unavailable",
            source=sample.source_id,
            name=sample.source_name,
            probes=len(results),
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        result = SourceAvailabilityResult(
            source_id=sample.source_id,
            source_name=sample.source_name,
            is_available=False,
            error=ERROR_ALL_SAMPLES_FAILED,
            checked_at=_now_ms(),
        )
        if self._unavailable_ttl > 0:
            self._cache[cache_key] = _VerdictCacheEntry(
                result, self._unavailable_ttl
            )
        return result

    async def check_multiple_sources(
        self, samples: Sequence[SourceSample]
    ) -> list[SourceAvailabilityResult]:
        """Check all sources concurrently; output order matches input order."""
        if not samples:
            return []
        results = await asyncio.gather(*(self.check_source(s) for s in samples))
        return list(results)


def filter_by_available_sources(
    videos: Sequence[VideoSummary], verdicts: Sequence[SourceAvailabilityResult]
) -> list[VideoSummary]:
    """Keep only videos whose source has an available verdict."""
    available = {v.source_id for v in verdicts if v.is_available}
    return [video for video in videos if video.source_id in available]
