"""Apple-CMS (``vod`` JSON API) client, async httpx implementation."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
import structlog

from kvideo.domain.entities.catalog import (
    DEFAULT_DETAIL_TEMPLATE,
    SearchResultSet,
    SourceConfig,
    VideoDetail,
    VideoSummary,
)
from kvideo.domain.entities.errors import NoPlayableContentError, UpstreamSourceError
from kvideo.domain.playback import parse_play_url

log = structlog.get_logger(__name__)

CUSTOM_SOURCE_ID = "custom"

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)


def _text(item: dict[str, Any], key: str) -> str:
    value = item.get(key)
    if value is None:
        return ""
    return str(value).strip()


def _optional(item: dict[str, Any], key: str) -> str | None:
    return _text(item, key) or None


def _to_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class HttpxVideoSourceClient:
    """Talks to Apple-CMS style providers.

    Implements ``VideoSourceClientPort`` from domain.ports.video_source.
    Every failure (transport, HTTP status, malformed JSON) surfaces as
    ``UpstreamSourceError`` so callers only handle one type.

    Args:
        http_client: Shared httpx.AsyncClient (injected).
        timeout_seconds: Per-call request timeout.
        user_agent: Sent with every upstream request.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        timeout_seconds: float = 10.0,
        user_agent: str = _DEFAULT_USER_AGENT,
    ) -> None:
        self._http = http_client
        self._timeout = timeout_seconds
        self._headers = {
            "User-Agent": user_agent,
            "Accept": "application/json",
        }

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _get_json(self, url: str, source_id: str) -> dict[str, Any]:
        """GET *url* and return the decoded JSON object."""
        try:
            resp = await self._http.get(
                url,
                headers=self._headers,
                timeout=self._timeout,
                follow_redirects=True,
            )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            log.warning(
                "source_http_error",
                source=source_id,
                status=e.response.status_code,
            )
            raise UpstreamSourceError(
                f"HTTP {e.response.status_code} from source {source_id}",
                source_id=source_id,
            ) from e
        except httpx.HTTPError as e:
            log.warning(
                "source_network_error",
                source=source_id,
                error=str(e) or type(e).__name__,
            )
            raise UpstreamSourceError(
                f"Request to source {source_id} failed: {e or type(e).__name__}",
                source_id=source_id,
            ) from e
        except ValueError as e:
            log.warning("source_invalid_json", source=source_id)
            raise UpstreamSourceError(
                f"Invalid JSON from source {source_id}",
                source_id=source_id,
            ) from e

        if not isinstance(data, dict):
            raise UpstreamSourceError(
                f"Unexpected payload from source {source_id}",
                source_id=source_id,
            )
        return data

    @staticmethod
    def _items(data: dict[str, Any], source_id: str) -> list[dict[str, Any]]:
        items = data.get("list")
        if items is None:
            return []
        if not isinstance(items, list):
            raise UpstreamSourceError(
                f"Unexpected 'list' field from source {source_id}",
                source_id=source_id,
            )
        return [item for item in items if isinstance(item, dict)]

    @staticmethod
    def _to_summary(item: dict[str, Any], source_id: str) -> VideoSummary | None:
        video_id = _text(item, "vod_id")
        if not video_id:
            return None
        return VideoSummary(
            id=video_id,
            title=_text(item, "vod_name"),
            source_id=source_id,
            poster=_text(item, "vod_pic"),
            play_url=_text(item, "vod_play_url"),
            play_from=_text(item, "vod_play_from"),
            year=_optional(item, "vod_year"),
            remarks=_optional(item, "vod_remarks"),
            category=_optional(item, "type_name"),
        )

    @staticmethod
    def _to_detail(item: dict[str, Any], source_id: str) -> VideoDetail:
        parsed = parse_play_url(
            _text(item, "vod_play_url"), _text(item, "vod_play_from")
        )
        if parsed.skipped:
            log.debug(
                "episode_segments_skipped",
                source=source_id,
                video_id=_text(item, "vod_id"),
                skipped=parsed.skipped,
            )
        return VideoDetail(
            id=_text(item, "vod_id"),
            title=_text(item, "vod_name"),
            source_id=source_id,
            poster=_text(item, "vod_pic"),
            year=_optional(item, "vod_year"),
            remarks=_optional(item, "vod_remarks"),
            category=_optional(item, "type_name"),
            description=_text(item, "vod_content"),
            actors=_text(item, "vod_actor"),
            director=_text(item, "vod_director"),
            area=_text(item, "vod_area"),
            episodes=parsed.episodes,
        )

    async def _fetch_detail(
        self, url: str, source_id: str, video_id: str
    ) -> VideoDetail:
        data = await self._get_json(url, source_id)
        items = self._items(data, source_id)
        if not items:
            raise NoPlayableContentError(
                f"Video {video_id!r} not found in source {source_id}"
            )
        return self._to_detail(items[0], source_id)

    # ------------------------------------------------------------------
    # Public API (VideoSourceClientPort)
    # ------------------------------------------------------------------

    async def search(
        self, source: SourceConfig, query: str, page: int = 1
    ) -> SearchResultSet:
        """Search one source. Raises UpstreamSourceError on failure."""
        url = source.base_url + source.search_template.format(
            query=quote(query, safe=""), page=page
        )
        data = await self._get_json(url, source.id)

        videos: list[VideoSummary] = []
        for item in self._items(data, source.id):
            summary = self._to_summary(item, source.id)
            if summary is not None:
                videos.append(summary)

        log.debug(
            "source_search_parsed",
            source=source.id,
            results=len(videos),
            page=page,
        )
        return SearchResultSet(
            source_id=source.id,
            videos=tuple(videos),
            page_count=_to_int(data.get("pagecount")),
        )

    async def detail(self, source: SourceConfig, video_id: str) -> VideoDetail:
        """Fetch one video from a configured source."""
        url = source.base_url + source.detail_template.format(
            id=quote(video_id, safe="")
        )
        return await self._fetch_detail(url, source.id, video_id)

    async def detail_custom(self, api_url: str, video_id: str) -> VideoDetail:
        """Fetch one video from an ad-hoc Apple-CMS endpoint."""
        url = api_url + DEFAULT_DETAIL_TEMPLATE.format(id=quote(video_id, safe=""))
        return await self._fetch_detail(url, CUSTOM_SOURCE_ID, video_id)
