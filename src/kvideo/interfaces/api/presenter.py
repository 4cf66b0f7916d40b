"""JSON presenters for the public API.

Video rows keep the Apple-CMS ``vod_*`` keys clients already consume;
envelope and verdict keys are camelCase.
"""

from __future__ import annotations

from typing import Any

from kvideo.domain.entities.availability import (
    SearchResponse,
    SourceAvailabilityResult,
    SourceGroup,
)
from kvideo.domain.entities.catalog import (
    EpisodeCandidate,
    SourceConfig,
    ValidatedEpisode,
    VideoDetail,
    VideoSummary,
)


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


def present_video(video: VideoSummary, *, source_name: str | None = None) -> dict[str, Any]:
    return _drop_none(
        {
            "vod_id": video.id,
            "vod_name": video.title,
            "vod_pic": video.poster,
            "vod_play_url": video.play_url,
            "vod_play_from": video.play_from,
            "vod_year": video.year,
            "vod_remarks": video.remarks,
            "type_name": video.category,
            "source": video.source_id,
            "sourceName": source_name,
        }
    )


def present_verdict(verdict: SourceAvailabilityResult) -> dict[str, Any]:
    return _drop_none(
        {
            "sourceId": verdict.source_id,
            "sourceName": verdict.source_name,
            "isAvailable": verdict.is_available,
            "sampleUrl": verdict.sample_url,
            "error": verdict.error,
            "checkedAt": verdict.checked_at,
        }
    )


def _present_group(group: SourceGroup, names: dict[str, str]) -> dict[str, Any]:
    name = names.get(group.source_id)
    return _drop_none(
        {
            "source": group.source_id,
            "results": [present_video(v, source_name=name) for v in group.videos],
            "responseTime": group.response_time_ms,
            "pageCount": group.page_count,
        }
    )


def present_search(response: SearchResponse) -> dict[str, Any]:
    names = {v.source_id: v.source_name for v in response.source_availability}
    return {
        "success": True,
        "query": response.query,
        "page": response.page,
        "sources": [_present_group(g, names) for g in response.sources],
        "totalResults": response.total_results,
        "availableSources": response.available_sources,
        "totalSources": response.total_sources,
        "sourceAvailability": [present_verdict(v) for v in response.source_availability],
    }


def _present_episode(episode: EpisodeCandidate | ValidatedEpisode) -> dict[str, Any]:
    data: dict[str, Any] = {
        "index": episode.index,
        "name": episode.name,
        "url": episode.url,
    }
    if isinstance(episode, ValidatedEpisode):
        data["isValid"] = episode.is_valid
    return data


def present_detail(detail: VideoDetail) -> dict[str, Any]:
    return {
        "success": True,
        "data": _drop_none(
            {
                "id": detail.id,
                "title": detail.title,
                "poster": detail.poster,
                "source": detail.source_id,
                "year": detail.year,
                "remarks": detail.remarks,
                "category": detail.category,
                "description": detail.description,
                "actors": detail.actors,
                "director": detail.director,
                "area": detail.area,
                "episodes": [_present_episode(ep) for ep in detail.episodes],
            }
        ),
    }


def present_sources(sources: list[SourceConfig]) -> dict[str, Any]:
    return {
        "success": True,
        "sources": [
            {"id": s.id, "name": s.name, "baseUrl": s.base_url} for s in sources
        ],
    }


def present_error(message: str) -> dict[str, Any]:
    return {"success": False, "error": message}
