"""Aggregated multi-source video search.

query -> parallel per-source search -> sampled availability check
-> drop unavailable sources -> regroup by source -> SearchResponse.

Per-request stages::

    DISPATCHED -> COLLECTED -> AVAILABILITY_CHECKED -> FILTERED -> RESPONDED

A failing source never fails the aggregate: its search call yields an
empty result set carrying the error, and it is reported as unavailable.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence
from typing import Protocol

import structlog

from kvideo.application.validation.source_checker import filter_by_available_sources
from kvideo.domain.entities.availability import (
    SearchResponse,
    SearchStage,
    SourceAvailabilityResult,
    SourceGroup,
    SourceSample,
)
from kvideo.domain.entities.catalog import SearchResultSet, SourceConfig, VideoSummary
from kvideo.domain.entities.errors import ClientInputError
from kvideo.domain.ports.video_source import VideoSourceClientPort

log = structlog.get_logger(__name__)


class _AvailabilityChecker(Protocol):
    """Checks a batch of sources against their sample videos."""

    async def check_multiple_sources(
        self, samples: Sequence[SourceSample]
    ) -> list[SourceAvailabilityResult]: ...


def _dedupe_videos(videos: Sequence[VideoSummary]) -> tuple[VideoSummary, ...]:
    """Drop repeated video ids within one source, first occurrence wins."""
    seen: set[str] = set()
    unique: list[VideoSummary] = []
    for video in videos:
        if video.id in seen:
            continue
        seen.add(video.id)
        unique.append(video)
    return tuple(unique)


def _unique_enabled(sources: Sequence[SourceConfig]) -> list[SourceConfig]:
    """Enabled sources in caller order, each id dispatched once."""
    seen: set[str] = set()
    unique: list[SourceConfig] = []
    for source in sources:
        if not source.enabled or source.id in seen:
            continue
        seen.add(source.id)
        unique.append(source)
    return unique


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class VideoSearchUseCase:
    """Fan a query out to all requested sources and keep only live ones.

    Flow:
        1. Dispatch one search per enabled source in parallel, each timed
           and bounded by ``source_timeout_seconds``.
        2. Collect every result set, failed ones included.
        3. Check availability of every source that returned videos,
           sampling up to ``sample_videos`` of them.
        4. Drop videos of unavailable sources and regroup by source.
        5. Respond with counts and the raw availability verdicts.
    """

    def __init__(
        self,
        *,
        client: VideoSourceClientPort,
        checker: _AvailabilityChecker,
        source_timeout_seconds: float = 10.0,
        sample_videos: int = 3,
    ) -> None:
        self._client = client
        self._checker = checker
        self._source_timeout = source_timeout_seconds
        self._sample_videos = sample_videos

    async def execute(
        self,
        query: str,
        sources: Sequence[SourceConfig],
        page: int = 1,
    ) -> SearchResponse:
        """Run one aggregated search.

        Raises:
            ClientInputError: Missing query, no usable sources or bad page.
        """
        query = (query or "").strip()
        if not query:
            raise ClientInputError("Invalid or missing query parameter")
        if page < 1:
            raise ClientInputError(f"Invalid page: {page}")

        enabled = _unique_enabled(sources)
        if not enabled:
            raise ClientInputError("At least one source must be specified")

        start = time.perf_counter()
        self._stage(SearchStage.DISPATCHED, query, sources=len(enabled))
        result_sets = await self._dispatch(query, enabled, page)

        self._stage(
            SearchStage.COLLECTED,
            query,
            failed=sum(1 for rs in result_sets if not rs.ok),
            videos=sum(len(rs.videos) for rs in result_sets),
        )
        verdicts = await self._check_availability(enabled, result_sets)

        available_count = sum(1 for v in verdicts if v.is_available)
        self._stage(
            SearchStage.AVAILABILITY_CHECKED,
            query,
            available=available_count,
            checked=len(verdicts),
        )
        groups = self._regroup(result_sets, verdicts)

        total_results = sum(len(g.videos) for g in groups)
        self._stage(SearchStage.FILTERED, query, results=total_results)

        response = SearchResponse(
            query=query,
            page=page,
            sources=tuple(groups),
            total_results=total_results,
            available_sources=available_count,
            total_sources=len(verdicts),
            source_availability=tuple(verdicts),
        )
        self._stage(SearchStage.RESPONDED, query, duration_ms=_elapsed_ms(start))

        log.info(
            "search_complete",
            query=query,
            page=page,
            total_results=total_results,
            available_sources=available_count,
            total_sources=len(verdicts),
        )
        return response

    @staticmethod
    def _stage(stage: SearchStage, query: str, **context: object) -> None:
        log.debug("search_stage", stage=stage.value, query=query, **context)

    async def _dispatch(
        self,
        query: str,
        sources: Sequence[SourceConfig],
        page: int,
    ) -> list[SearchResultSet]:
        """Search all sources in parallel; one result set per source."""
        tasks = [self._search_one(source, query, page) for source in sources]
        return list(await asyncio.gather(*tasks))

    async def _search_one(
        self,
        source: SourceConfig,
        query: str,
        page: int,
    ) -> SearchResultSet:
        """Search a single source, converting any failure into an error row."""
        start = time.perf_counter()
        try:
            result = await asyncio.wait_for(
                self._client.search(source, query, page),
                timeout=self._source_timeout,
            )
        except TimeoutError:
            log.warning(
                "source_search_timeout",
                source=source.id,
                timeout=self._source_timeout,
            )
            return SearchResultSet(
                source_id=source.id,
                response_time_ms=_elapsed_ms(start),
                error=f"Search timed out after {self._source_timeout}s",
            )
        except Exception as e:
            log.warning(
                "source_search_failed",
                source=source.id,
                query=query,
                error=str(e),
                exc_info=True,
            )
            return SearchResultSet(
                source_id=source.id,
                response_time_ms=_elapsed_ms(start),
                error=str(e) or type(e).__name__,
            )

        videos = _dedupe_videos(result.videos)
        log.debug(
            "source_search_done",
            source=source.id,
            result_count=len(videos),
            duplicates=len(result.videos) - len(videos),
        )
        return SearchResultSet(
            source_id=source.id,
            videos=videos,
            response_time_ms=_elapsed_ms(start),
            page_count=result.page_count,
        )

    async def _check_availability(
        self,
        sources: Sequence[SourceConfig],
        result_sets: Sequence[SearchResultSet],
    ) -> list[SourceAvailabilityResult]:
        """Verdicts for every dispatched source, in dispatch order.

        Failed searches are unavailable with their own error; all other
        sources go through the checker (zero videos costs no probe).
        """
        names = {s.id: s.name for s in sources}
        verdicts: dict[str, SourceAvailabilityResult] = {}
        samples: list[SourceSample] = []

        for rs in result_sets:
            if not rs.ok:
                verdicts[rs.source_id] = SourceAvailabilityResult(
                    source_id=rs.source_id,
                    source_name=names.get(rs.source_id, rs.source_id),
                    is_available=False,
                    error=rs.error,
                    checked_at=int(time.time() * 1000),
                )
                continue
            samples.append(
                SourceSample(
                    source_id=rs.source_id,
                    source_name=names.get(rs.source_id, rs.source_id),
                    videos=rs.videos[: self._sample_videos],
                )
            )

        for verdict in await self._checker.check_multiple_sources(samples):
            verdicts[verdict.source_id] = verdict

        return [verdicts[rs.source_id] for rs in result_sets]

    @staticmethod
    def _regroup(
        result_sets: Sequence[SearchResultSet],
        verdicts: Sequence[SourceAvailabilityResult],
    ) -> list[SourceGroup]:
        """Keep available sources only, with their collection-time timing."""
        kept = filter_by_available_sources(
            [v for rs in result_sets for v in rs.videos], verdicts
        )
        by_source: dict[str, list[VideoSummary]] = {}
        for video in kept:
            by_source.setdefault(video.source_id, []).append(video)

        available = {v.source_id for v in verdicts if v.is_available}
        return [
            SourceGroup(
                source_id=rs.source_id,
                videos=tuple(by_source.get(rs.source_id, ())),
                response_time_ms=rs.response_time_ms,
                page_count=rs.page_count,
            )
            for rs in result_sets
            if rs.source_id in available
        ]
