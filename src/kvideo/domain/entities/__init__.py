from .availability import (
    LivenessProbeResult,
    ProbeFailureReason,
    SearchResponse,
    SearchStage,
    SourceAvailabilityResult,
    SourceGroup,
    SourceSample,
)
from .catalog import (
    EpisodeCandidate,
    ParseStatus,
    PlaybackParse,
    SearchResultSet,
    SourceConfig,
    ValidatedEpisode,
    VideoDetail,
    VideoSummary,
)
from .errors import (
    ClientInputError,
    KVideoError,
    NoPlayableContentError,
    SourceNotFoundError,
    UpstreamSourceError,
)

__all__ = [
    "ClientInputError",
    "EpisodeCandidate",
    "KVideoError",
    "LivenessProbeResult",
    "NoPlayableContentError",
    "ParseStatus",
    "PlaybackParse",
    "ProbeFailureReason",
    "SearchResponse",
    "SearchResultSet",
    "SearchStage",
    "SourceAvailabilityResult",
    "SourceConfig",
    "SourceGroup",
    "SourceNotFoundError",
    "SourceSample",
    "UpstreamSourceError",
    "ValidatedEpisode",
    "VideoDetail",
    "VideoSummary",
]
