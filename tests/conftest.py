"""Shared test fixtures for the KVideo test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from kvideo.domain.entities.catalog import SourceConfig, VideoSummary
from tests.helpers import FakeProbePool, make_source, make_video

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def source() -> SourceConfig:
    return make_source()


@pytest.fixture()
def video() -> VideoSummary:
    return make_video()


# ---------------------------------------------------------------------------
# Mock port fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def fake_pool() -> FakeProbePool:
    return FakeProbePool()


@pytest.fixture()
def mock_source_client() -> AsyncMock:
    """Mock VideoSourceClientPort."""
    client = AsyncMock()
    client.search = AsyncMock()
    client.detail = AsyncMock()
    client.detail_custom = AsyncMock()
    return client


@pytest.fixture()
def mock_registry(source: SourceConfig) -> MagicMock:
    """Mock SourceRegistryPort (synchronous methods)."""
    registry = MagicMock()
    registry.get.side_effect = lambda sid: source if sid == source.id else None
    registry.enabled.return_value = [source]
    registry.resolve.side_effect = lambda ids: [source] if source.id in ids else []
    return registry
