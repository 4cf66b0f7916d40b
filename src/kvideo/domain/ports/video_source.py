"""Port for upstream video source APIs."""

from __future__ import annotations

from typing import Protocol

from kvideo.domain.entities.catalog import SearchResultSet, SourceConfig, VideoDetail


class VideoSourceClientPort(Protocol):
    """Async interface for one provider's search and detail endpoints.

    All calls raise ``UpstreamSourceError`` on transport, status or
    payload failures; detail calls raise ``NoPlayableContentError`` when
    the provider does not know the video.
    """

    async def search(
        self, source: SourceConfig, query: str, page: int = 1
    ) -> SearchResultSet: ...

    async def detail(self, source: SourceConfig, video_id: str) -> VideoDetail: ...

    async def detail_custom(self, api_url: str, video_id: str) -> VideoDetail: ...
