"""Video detail lookup with episode liveness filtering."""

from __future__ import annotations

import time
from dataclasses import replace
from typing import Protocol

import structlog

from kvideo.domain.entities.catalog import (
    EpisodeCandidate,
    ValidatedEpisode,
    VideoDetail,
)
from kvideo.domain.entities.errors import (
    ClientInputError,
    NoPlayableContentError,
    SourceNotFoundError,
)
from kvideo.domain.playback import is_valid_url_format
from kvideo.domain.ports.source_registry import SourceRegistryPort
from kvideo.domain.ports.video_source import VideoSourceClientPort

log = structlog.get_logger(__name__)


class _EpisodeValidator(Protocol):
    async def filter_valid_episodes(
        self, episodes: list[EpisodeCandidate]
    ) -> list[ValidatedEpisode]: ...


class VideoDetailUseCase:
    """Fetch one video's detail and keep only episodes that look playable.

    The video comes either from a configured source (``source_id``) or
    from an ad-hoc Apple-CMS endpoint (``custom_api``).  Both paths run
    through the same episode validation.
    """

    def __init__(
        self,
        *,
        client: VideoSourceClientPort,
        registry: SourceRegistryPort,
        validator: _EpisodeValidator,
    ) -> None:
        self._client = client
        self._registry = registry
        self._validator = validator

    async def execute(
        self,
        video_id: str | None,
        source_id: str | None = None,
        custom_api: str | None = None,
    ) -> VideoDetail:
        """Return the detail with only valid episodes, in original order.

        Raises:
            ClientInputError: Missing id, or neither source nor custom API.
            SourceNotFoundError: ``source_id`` is not configured.
            UpstreamSourceError: The upstream detail call failed.
            NoPlayableContentError: No episode survived validation.
        """
        video_id = (video_id or "").strip()
        source_id = (source_id or "").strip() or None
        custom_api = (custom_api or "").strip() or None

        if not video_id:
            raise ClientInputError("Missing video ID parameter")

        start = time.perf_counter()
        if custom_api:
            if not is_valid_url_format(custom_api):
                raise ClientInputError(f"Invalid customApi URL: {custom_api}")
            detail = await self._client.detail_custom(custom_api, video_id)
        else:
            if source_id is None:
                raise ClientInputError("Missing source parameter")
            source = self._registry.get(source_id)
            if source is None:
                raise SourceNotFoundError(f"Invalid source ID: {source_id}")
            detail = await self._client.detail(source, video_id)

        candidates = [
            ep for ep in detail.episodes if isinstance(ep, EpisodeCandidate)
        ]
        validated = await self._validator.filter_valid_episodes(candidates)
        valid = tuple(ep for ep in validated if ep.is_valid)

        log.info(
            "video_detail_validated",
            video_id=video_id,
            source=source_id or custom_api,
            episodes=len(candidates),
            valid=len(valid),
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )

        if not valid:
            raise NoPlayableContentError(
                "No playable episodes found from this source. "
                "Please try another source."
            )
        return replace(detail, episodes=valid)
