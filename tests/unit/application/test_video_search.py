"""Tests for VideoSearchUseCase (aggregated multi-source search)."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from kvideo.application.use_cases.video_search import VideoSearchUseCase
from kvideo.application.validation.source_checker import (
    ERROR_ALL_SAMPLES_FAILED,
    ERROR_NO_VIDEOS,
    SourceAvailabilityChecker,
)
from kvideo.domain.entities.catalog import SearchResultSet, SourceConfig
from kvideo.domain.entities.errors import ClientInputError, UpstreamSourceError
from tests.helpers import make_source, make_video, probe_by_url

_ALPHA = make_source("alpha", "Alpha")
_BETA = make_source("beta", "Beta")
_GAMMA = make_source("gamma", "Gamma")


def _live(source_id: str, n: int) -> str:
    return f"https://{source_id}.cdn.example.com/{n}.mp4"


def _results(source_id: str, count: int) -> SearchResultSet:
    return SearchResultSet(
        source_id=source_id,
        videos=tuple(
            make_video(str(i), source_id, url=_live(source_id, i)) for i in range(count)
        ),
    )


def _client(by_source: dict[str, SearchResultSet | Exception]) -> AsyncMock:
    async def _search(source: SourceConfig, query: str, page: int = 1):
        outcome = by_source[source.id]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    client = AsyncMock()
    client.search = AsyncMock(side_effect=_search)
    return client


def _uc(client: AsyncMock, live_urls: set[str], **kwargs) -> VideoSearchUseCase:
    checker = SourceAvailabilityChecker(probe=probe_by_url(live_urls))
    return VideoSearchUseCase(client=client, checker=checker, **kwargs)


class TestValidation:
    async def test_blank_query_rejected(self) -> None:
        uc = _uc(_client({}), set())
        with pytest.raises(ClientInputError):
            await uc.execute("   ", [_ALPHA])

    async def test_no_sources_rejected(self) -> None:
        uc = _uc(_client({}), set())
        with pytest.raises(ClientInputError):
            await uc.execute("demo", [])

    async def test_only_disabled_sources_rejected(self) -> None:
        disabled = SourceConfig(id="x", name="X", base_url="https://x", enabled=False)
        uc = _uc(_client({}), set())
        with pytest.raises(ClientInputError):
            await uc.execute("demo", [disabled])

    async def test_bad_page_rejected(self) -> None:
        uc = _uc(_client({}), set())
        with pytest.raises(ClientInputError):
            await uc.execute("demo", [_ALPHA], page=0)


class TestAggregation:
    async def test_mixed_sources_end_to_end(self) -> None:
        """One source errors, one has dead media, one works."""
        client = _client(
            {
                "alpha": UpstreamSourceError("HTTP 502", source_id="alpha"),
                "beta": _results("beta", 5),
                "gamma": _results("gamma", 4),
            }
        )
        uc = _uc(client, {_live("gamma", 0)})

        response = await uc.execute(" demo ", [_ALPHA, _BETA, _GAMMA])

        assert response.query == "demo"
        assert [g.source_id for g in response.sources] == ["gamma"]
        assert len(response.sources[0].videos) == 4
        assert response.total_results == 4
        assert response.available_sources == 1
        assert response.total_sources == 3

        verdicts = {v.source_id: v for v in response.source_availability}
        assert verdicts["alpha"].is_available is False
        assert verdicts["alpha"].error == "HTTP 502"
        assert verdicts["beta"].error == ERROR_ALL_SAMPLES_FAILED
        assert verdicts["gamma"].is_available is True
        assert verdicts["gamma"].sample_url == _live("gamma", 0)

    async def test_verdicts_in_dispatch_order(self) -> None:
        client = _client(
            {
                "alpha": _results("alpha", 1),
                "beta": RuntimeError("boom"),
                "gamma": _results("gamma", 0),
            }
        )
        uc = _uc(client, {_live("alpha", 0)})

        response = await uc.execute("demo", [_ALPHA, _BETA, _GAMMA])

        assert [v.source_id for v in response.source_availability] == [
            "alpha",
            "beta",
            "gamma",
        ]
        assert response.source_availability[2].error == ERROR_NO_VIDEOS

    async def test_zero_available_is_successful_empty_response(self) -> None:
        client = _client({"alpha": _results("alpha", 3), "beta": _results("beta", 0)})
        uc = _uc(client, set())

        response = await uc.execute("demo", [_ALPHA, _BETA])

        assert response.sources == ()
        assert response.total_results == 0
        assert response.available_sources == 0
        assert response.total_sources == 2

    async def test_dispatches_in_parallel(self) -> None:
        started: list[str] = []
        gate = asyncio.Event()

        async def _search(source: SourceConfig, query: str, page: int = 1):
            started.append(source.id)
            if len(started) == 2:
                gate.set()
            await gate.wait()
            return _results(source.id, 1)

        client = AsyncMock()
        client.search = AsyncMock(side_effect=_search)
        uc = _uc(client, {_live("alpha", 0), _live("beta", 0)})

        response = await asyncio.wait_for(uc.execute("demo", [_ALPHA, _BETA]), 1.0)

        assert response.available_sources == 2

    async def test_slow_source_times_out_without_failing_others(self) -> None:
        async def _search(source: SourceConfig, query: str, page: int = 1):
            if source.id == "alpha":
                await asyncio.Event().wait()
            return _results(source.id, 2)

        client = AsyncMock()
        client.search = AsyncMock(side_effect=_search)
        uc = _uc(client, {_live("beta", 0)}, source_timeout_seconds=0.05)

        response = await uc.execute("demo", [_ALPHA, _BETA])

        assert [g.source_id for g in response.sources] == ["beta"]
        alpha = response.source_availability[0]
        assert alpha.is_available is False
        assert "timed out" in (alpha.error or "")

    async def test_duplicate_ids_within_source_are_dropped(self) -> None:
        dup = SearchResultSet(
            source_id="alpha",
            videos=(
                make_video("1", "alpha", url=_live("alpha", 0)),
                make_video("1", "alpha", url=_live("alpha", 0)),
                make_video("2", "alpha", url=_live("alpha", 1)),
            ),
        )
        uc = _uc(_client({"alpha": dup}), {_live("alpha", 0)})

        response = await uc.execute("demo", [_ALPHA])

        assert [v.id for v in response.sources[0].videos] == ["1", "2"]
        assert response.total_results == 2

    async def test_only_first_three_videos_sampled(self) -> None:
        probe = probe_by_url(set())
        checker = SourceAvailabilityChecker(probe=probe)
        uc = VideoSearchUseCase(
            client=_client({"alpha": _results("alpha", 10)}), checker=checker
        )

        await uc.execute("demo", [_ALPHA])

        probed = [call.args[0] for call in probe.probe.await_args_list]
        assert probed == [_live("alpha", i) for i in range(3)]

    async def test_response_time_is_preserved(self) -> None:
        uc = _uc(_client({"alpha": _results("alpha", 1)}), {_live("alpha", 0)})

        response = await uc.execute("demo", [_ALPHA])

        assert response.sources[0].response_time_ms is not None
        assert response.sources[0].response_time_ms >= 0

    async def test_page_is_forwarded(self) -> None:
        client = _client({"alpha": _results("alpha", 1)})
        uc = _uc(client, {_live("alpha", 0)})

        response = await uc.execute("demo", [_ALPHA], page=3)

        assert response.page == 3
        client.search.assert_awaited_once_with(_ALPHA, "demo", 3)

    async def test_repeated_source_is_dispatched_once(self) -> None:
        client = _client({"alpha": _results("alpha", 2)})
        uc = _uc(client, {_live("alpha", 0)})

        response = await uc.execute("demo", [_ALPHA, _ALPHA])

        assert client.search.await_count == 1
        assert [g.source_id for g in response.sources] == ["alpha"]
        assert response.total_results == 2
        assert response.available_sources == 1
        assert response.total_sources == 1
        assert [v.source_id for v in response.source_availability] == ["alpha"]

    async def test_page_count_is_carried_to_groups(self) -> None:
        paged = SearchResultSet(
            source_id="alpha",
            videos=(make_video("1", "alpha", url=_live("alpha", 0)),),
            page_count=7,
        )
        uc = _uc(_client({"alpha": paged}), {_live("alpha", 0)})

        response = await uc.execute("demo", [_ALPHA])

        assert response.sources[0].page_count == 7

    async def test_videos_of_unavailable_sources_never_leak(self) -> None:
        uc = _uc(
            _client({"alpha": _results("alpha", 2), "beta": _results("beta", 2)}),
            {_live("alpha", 0)},
        )

        response = await uc.execute("demo", [_ALPHA, _BETA])

        kept = [v for g in response.sources for v in g.videos]
        assert {v.source_id for v in kept} == {"alpha"}
        assert response.total_results == 2
