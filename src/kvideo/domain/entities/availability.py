"""Domain entities for liveness probing and source availability."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .catalog import VideoSummary


class ProbeFailureReason(str, Enum):
    """Why a probe decided a URL is not reachable."""

    FORMAT = "format"  # Not an http(s) URL, no request was made
    TIMEOUT = "timeout"
    NETWORK = "network"  # DNS/TCP/TLS/protocol errors
    STATUS = "status"  # Upstream answered with a failing status code


@dataclass(frozen=True)
class LivenessProbeResult:
    """Outcome of probing a single URL. Transient, never persisted."""

    url: str
    is_reachable: bool
    reason: ProbeFailureReason | None = None
    detail: str | None = None
    status_code: int | None = None
    elapsed_ms: int = 0
    attempts: int = 0


@dataclass(frozen=True)
class SourceSample:
    """Input to the availability check: a source and the videos it returned."""

    source_id: str
    source_name: str
    videos: tuple[VideoSummary, ...] = ()


@dataclass(frozen=True)
class SourceAvailabilityResult:
    """Per-request verdict on whether a source is currently serving media."""

    source_id: str
    source_name: str
    is_available: bool
    sample_url: str | None = None
    error: str | None = None
    checked_at: int = 0  # Epoch milliseconds


class SearchStage(str, Enum):
    """Stages of one aggregated search request, in order."""

    DISPATCHED = "dispatched"
    COLLECTED = "collected"
    AVAILABILITY_CHECKED = "availability_checked"
    FILTERED = "filtered"
    RESPONDED = "responded"


@dataclass(frozen=True)
class SourceGroup:
    """Videos of one available source, regrouped after filtering."""

    source_id: str
    videos: tuple[VideoSummary, ...]
    response_time_ms: int | None = None
    page_count: int | None = None  # Upstream pagination, when reported


@dataclass(frozen=True)
class SearchResponse:
    """Filtered, regrouped result of an aggregated search."""

    query: str
    page: int
    sources: tuple[SourceGroup, ...]
    total_results: int
    available_sources: int
    total_sources: int
    source_availability: tuple[SourceAvailabilityResult, ...]
