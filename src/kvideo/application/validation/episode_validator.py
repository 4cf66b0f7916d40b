"""Sampled episode validation.

Probing every episode of a season is too slow, so only the first few
format-valid episodes are probed and the verdict is generalized:

    1. Syntactically invalid URLs are invalid, no network cost.
    2. Probe the first ``sample_size`` format-valid episodes (index order)
       with at most ``max_concurrent`` probes in flight.
    3. Apply the sample policy; HLS manifests are always kept.

This trades false positives (a dead mid-season link) for latency.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog

from kvideo.application.validation.policies import (
    EpisodeSamplePolicy,
    EpisodeValidityRule,
    any_sample_reachable,
    sample_or_manifest,
)
from kvideo.domain.entities.availability import LivenessProbeResult
from kvideo.domain.entities.catalog import EpisodeCandidate, ValidatedEpisode
from kvideo.domain.playback import is_valid_url_format
from kvideo.domain.ports.concurrency import ProbeConcurrencyPoolPort
from kvideo.domain.ports.liveness_probe import LivenessProbePort

log = structlog.get_logger(__name__)


class EpisodeValidator:
    """Marks each episode of a video as valid or invalid by sampling."""

    def __init__(
        self,
        *,
        probe: LivenessProbePort,
        pool: ProbeConcurrencyPoolPort,
        sample_size: int = 3,
        max_concurrent: int = 5,
        sample_policy: EpisodeSamplePolicy = any_sample_reachable,
        validity_rule: EpisodeValidityRule = sample_or_manifest,
    ) -> None:
        self._probe = probe
        self._pool = pool
        self._sample_size = sample_size
        self._max_concurrent = max_concurrent
        self._sample_policy = sample_policy
        self._validity_rule = validity_rule

    async def filter_valid_episodes(
        self, episodes: Sequence[EpisodeCandidate]
    ) -> list[ValidatedEpisode]:
        """Return every episode with its ``is_valid`` flag, input order kept."""
        format_ok = [is_valid_url_format(ep.url) for ep in episodes]
        candidates = [ep for ep, ok in zip(episodes, format_ok) if ok]

        if not candidates:
            log.info(
                "episode_validation_no_valid_format",
                total=len(episodes),
            )
            return [_mark(ep, False) for ep in episodes]

        samples = sorted(candidates, key=lambda ep: ep.index)[: self._sample_size]
        results = await self._probe_samples([ep.url for ep in samples])
        samples_ok = self._sample_policy(results)

        validated = [
            _mark(ep, ok and self._validity_rule(ep.url, samples_ok))
            for ep, ok in zip(episodes, format_ok)
        ]

        log.info(
            "episode_validation_completed",
            total=len(episodes),
            format_valid=len(candidates),
            sampled=len(samples),
            sample_reachable=sum(1 for r in results if r.is_reachable),
            valid=sum(1 for ep in validated if ep.is_valid),
        )
        return validated

    async def _probe_samples(self, urls: list[str]) -> list[LivenessProbeResult]:
        """Probe sample URLs concurrently under the per-request cap."""
        async with self._pool.request(max_in_flight=self._max_concurrent) as budget:

            async def _probe_one(url: str) -> LivenessProbeResult:
                async with budget.acquire():
                    return await self._probe.probe(url)

            return list(await asyncio.gather(*(_probe_one(u) for u in urls)))


def _mark(episode: EpisodeCandidate, is_valid: bool) -> ValidatedEpisode:
    return ValidatedEpisode(
        index=episode.index,
        name=episode.name,
        url=episode.url,
        is_valid=is_valid,
    )
