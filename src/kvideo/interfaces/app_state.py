"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from kvideo.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from kvideo.application.use_cases import VideoDetailUseCase, VideoSearchUseCase
    from kvideo.application.validation.episode_validator import EpisodeValidator
    from kvideo.application.validation.source_checker import (
        SourceAvailabilityChecker,
    )
    from kvideo.domain.ports import (
        LivenessProbePort,
        SourceRegistryPort,
        VideoSourceClientPort,
    )
    from kvideo.infrastructure.concurrency import ProbeConcurrencyPool


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient
    probe_pool: ProbeConcurrencyPool

    # Domain Ports
    sources: SourceRegistryPort
    source_client: VideoSourceClientPort
    liveness_probe: LivenessProbePort

    # Application Services
    episode_validator: EpisodeValidator
    source_checker: SourceAvailabilityChecker

    # Use cases
    search_uc: VideoSearchUseCase
    detail_uc: VideoDetailUseCase
