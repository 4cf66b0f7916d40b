"""Domain entities for source catalogs and search results.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_SEARCH_TEMPLATE = "?ac=detail&wd={query}&pg={page}"
DEFAULT_DETAIL_TEMPLATE = "?ac=detail&ids={id}"


@dataclass(frozen=True)
class SourceConfig:
    """One upstream video provider (Apple-CMS style ``vod`` API)."""

    id: str  # Stable identifier, e.g. "custom_0"
    name: str  # Display name
    base_url: str  # API endpoint, e.g. "https://example.com/api.php/provide/vod"
    search_template: str = DEFAULT_SEARCH_TEMPLATE
    detail_template: str = DEFAULT_DETAIL_TEMPLATE
    enabled: bool = True


@dataclass(frozen=True)
class VideoSummary:
    """A single search hit, tagged with the source that returned it."""

    id: str
    title: str
    source_id: str
    poster: str = ""
    play_url: str = ""  # Raw episode blob: "Ep1$url1#Ep2$url2$$$..."
    play_from: str = ""  # Play-group labels: "m3u8$$$embed"
    year: str | None = None
    remarks: str | None = None
    category: str | None = None


@dataclass(frozen=True)
class SearchResultSet:
    """Raw result of one source's search call.

    A failed call still produces a result set: empty ``videos`` and
    ``error`` set to the failure message.
    """

    source_id: str
    videos: tuple[VideoSummary, ...] = ()
    response_time_ms: int = 0
    error: str | None = None
    page_count: int | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class EpisodeCandidate:
    """One (index, name, url) triple parsed from an episode blob."""

    index: int
    name: str
    url: str


@dataclass(frozen=True)
class ValidatedEpisode:
    """An episode after liveness validation."""

    index: int
    name: str
    url: str
    is_valid: bool


class ParseStatus(str, Enum):
    """Outcome of parsing an episode blob."""

    SUCCESS = "success"  # Every segment produced an episode
    PARTIAL = "partial"  # Some segments were malformed and skipped
    EMPTY = "empty"  # Nothing usable


@dataclass(frozen=True)
class PlaybackParse:
    """Tagged result of :func:`kvideo.domain.playback.parse_play_url`."""

    status: ParseStatus
    episodes: tuple[EpisodeCandidate, ...] = ()
    skipped: int = 0
    group: str = ""  # Label of the play group the episodes came from


@dataclass(frozen=True)
class VideoDetail:
    """Full video metadata plus its episode list."""

    id: str
    title: str
    source_id: str
    poster: str = ""
    year: str | None = None
    remarks: str | None = None
    category: str | None = None
    description: str = ""
    actors: str = ""
    director: str = ""
    area: str = ""
    episodes: tuple[EpisodeCandidate | ValidatedEpisode, ...] = field(
        default_factory=tuple
    )
