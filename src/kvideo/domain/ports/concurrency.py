"""Concurrency budget ports for request-scoped probe limits."""

from __future__ import annotations

from typing import AsyncContextManager, Protocol, runtime_checkable


@runtime_checkable
class ProbeBudgetPort(Protocol):
    """Per-request probe budget handle.

    ``acquire()`` blocks while the request already holds its cap of
    in-flight probes (or its fair share of the global slots).
    """

    def acquire(self) -> AsyncContextManager[None]:
        """Acquire one probe slot (async context manager)."""
        ...


@runtime_checkable
class ProbeConcurrencyPoolPort(Protocol):
    """Global probe slot pool handing out per-request budgets."""

    def request(
        self, *, max_in_flight: int | None = None
    ) -> AsyncContextManager[ProbeBudgetPort]:
        """Enter a request scope, returning a budget handle."""
        ...
