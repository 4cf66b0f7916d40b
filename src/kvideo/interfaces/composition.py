"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from kvideo.application.use_cases import VideoDetailUseCase, VideoSearchUseCase
from kvideo.application.validation.episode_validator import EpisodeValidator
from kvideo.application.validation.source_checker import SourceAvailabilityChecker
from kvideo.infrastructure.concurrency import ProbeConcurrencyPool
from kvideo.infrastructure.sources import ConfigSourceRegistry, HttpxVideoSourceClient
from kvideo.infrastructure.validation.http_liveness_probe import HttpLivenessProbe
from kvideo.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. HTTP client (shared by source client and liveness probe)
        2. Source registry + source client
        3. Probe pool + liveness probe
        4. Validators (episode, source availability)
        5. Use cases
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) Shared HTTP client; per-call timeouts are set by each caller
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=True,
        limits=httpx.Limits(max_connections=config.probe.total_slots * 2),
    )
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    # 2) Sources
    state.sources = ConfigSourceRegistry(config.source_configs())
    state.source_client = HttpxVideoSourceClient(
        state.http_client,
        timeout_seconds=config.http_timeout_seconds,
        user_agent=config.http_user_agent,
    )
    log.info(
        "sources_registered",
        total=len(config.sources),
        enabled=len(state.sources.enabled()),
    )

    # 3) Liveness probing
    state.probe_pool = ProbeConcurrencyPool(
        total_slots=config.probe.total_slots,
        per_request_slots=config.search.episode_max_concurrent,
    )
    state.liveness_probe = HttpLivenessProbe(
        state.http_client,
        timeout_seconds=config.probe.timeout_seconds,
        max_retries=config.probe.max_retries,
        retry_delay_seconds=config.probe.retry_delay_seconds,
    )
    log.info(
        "liveness_probe_initialized",
        timeout=config.probe.timeout_seconds,
        max_retries=config.probe.max_retries,
        total_slots=config.probe.total_slots,
    )

    # 4) Validators
    state.episode_validator = EpisodeValidator(
        probe=state.liveness_probe,
        pool=state.probe_pool,
        sample_size=config.search.episode_sample_size,
        max_concurrent=config.search.episode_max_concurrent,
    )
    state.source_checker = SourceAvailabilityChecker(
        probe=state.liveness_probe,
        max_samples=config.search.sample_videos,
        unavailable_ttl_seconds=config.search.unavailable_ttl_seconds,
    )

    # 5) Use cases
    state.search_uc = VideoSearchUseCase(
        client=state.source_client,
        checker=state.source_checker,
        source_timeout_seconds=config.search.source_timeout_seconds,
        sample_videos=config.search.sample_videos,
    )
    state.detail_uc = VideoDetailUseCase(
        client=state.source_client,
        registry=state.sources,
        validator=state.episode_validator,
    )

    log.info("app_startup_complete")

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")

        log.info("app_shutdown_complete")
