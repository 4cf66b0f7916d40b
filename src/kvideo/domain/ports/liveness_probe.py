"""Port for URL liveness probing."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from kvideo.domain.entities.availability import LivenessProbeResult


@runtime_checkable
class LivenessProbePort(Protocol):
    """Infers whether a media URL is likely playable without downloading it.

    Implementations never raise for unreachable URLs: failures are
    reported through ``LivenessProbeResult.is_reachable``.
    """

    async def probe(self, url: str) -> LivenessProbeResult:
        """Probe a single URL (format check, HEAD request, bounded retry)."""
        ...
