"""Global probe slot pool with per-request caps.

All concurrent requests share one pool of probe slots.  Each request
receives a ``ProbeBudget`` limiting how many probes it may have in
flight at once:

    limit = min(per_request_cap, max(1, total_slots // active_requests))

so a single request never exceeds its cap (5 for episode sampling) and
a burst of requests cannot starve each other.  When a request exits,
remaining requests automatically see a larger fair-share allowance.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog

log = structlog.get_logger(__name__)


class ProbeBudget:
    """Per-request probe budget.

    Created by :meth:`ProbeConcurrencyPool.request`, not instantiated
    directly.
    """

    def __init__(
        self,
        *,
        semaphore: asyncio.Semaphore,
        pool: ProbeConcurrencyPool,
        condition: asyncio.Condition,
        max_in_flight: int,
    ) -> None:
        self._semaphore = semaphore
        self._pool = pool
        self._condition = condition
        self._max_in_flight = max_in_flight
        self._held = 0

    @property
    def held(self) -> int:
        return self._held

    def limit(self) -> int:
        active = self._pool.active_requests
        fair_share = max(1, self._pool.total_slots // active) if active > 0 else 1
        return min(self._max_in_flight, fair_share)

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[None]:
        """Acquire one probe slot, respecting the per-request limit."""
        async with self._condition:
            while self._held >= self.limit():
                await self._condition.wait()
            self._held += 1
        try:
            async with self._semaphore:
                yield
        finally:
            async with self._condition:
                self._held -= 1
                self._condition.notify_all()


class ProbeConcurrencyPool:
    """Application-level singleton managing global probe slots.

    Parameters:
        total_slots: Probe slots shared by all requests.
        per_request_slots: Default cap on in-flight probes per request.
    """

    def __init__(self, *, total_slots: int = 32, per_request_slots: int = 5) -> None:
        if total_slots < 1 or per_request_slots < 1:
            raise ValueError("slot counts must be >= 1")
        self.total_slots = total_slots
        self.per_request_slots = per_request_slots
        self._semaphore = asyncio.Semaphore(total_slots)
        self._active_requests = 0
        self._condition = asyncio.Condition()

    @property
    def active_requests(self) -> int:
        return self._active_requests

    @asynccontextmanager
    async def request(
        self, *, max_in_flight: int | None = None
    ) -> AsyncIterator[ProbeBudget]:
        """Enter a request scope, returning a capped budget.

        Increments the active request counter on entry and decrements
        on exit; waiting budgets recalculate their fair share.
        """
        async with self._condition:
            self._active_requests += 1
            self._condition.notify_all()
        budget = ProbeBudget(
            semaphore=self._semaphore,
            pool=self,
            condition=self._condition,
            max_in_flight=max_in_flight or self.per_request_slots,
        )
        try:
            yield budget
        finally:
            async with self._condition:
                self._active_requests -= 1
                self._condition.notify_all()
            log.debug(
                "probe_budget_released",
                active_requests=self._active_requests,
            )

    def snapshot(self) -> dict[str, int]:
        """Diagnostic view of the pool."""
        return {
            "total_slots": self.total_slots,
            "per_request_slots": self.per_request_slots,
            "active_requests": self._active_requests,
        }
