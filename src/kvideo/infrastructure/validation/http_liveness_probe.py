"""HTTP liveness probe for media URLs using HEAD requests with bounded retry."""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

import structlog
from httpx import HTTPError, TimeoutException

from kvideo.domain.entities.availability import LivenessProbeResult, ProbeFailureReason
from kvideo.domain.playback import is_valid_url_format

if TYPE_CHECKING:
    from httpx import AsyncClient

log = structlog.get_logger(__name__)

_PROBE_USER_AGENT = "Mozilla/5.0"

# Many providers reject metadata-only requests but serve playback fine,
# so 403 counts as reachable.
_OPTIMISTIC_STATUS_CODES: frozenset[int] = frozenset({403})

# The file is gone; retrying will not change the answer.
_TERMINAL_STATUS_CODES: frozenset[int] = frozenset({404, 410})


def _is_reachable_status(status_code: int) -> bool:
    return 200 <= status_code < 300 or status_code in _OPTIMISTIC_STATUS_CODES


class _Attempt:
    """Outcome of a single HEAD attempt."""

    __slots__ = ("reachable", "reason", "detail", "status_code")

    def __init__(
        self,
        *,
        reachable: bool,
        reason: ProbeFailureReason | None = None,
        detail: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.reachable = reachable
        self.reason = reason
        self.detail = detail
        self.status_code = status_code

    @property
    def is_terminal(self) -> bool:
        return self.status_code in _TERMINAL_STATUS_CODES


class HttpLivenessProbe:
    """Infers playability of a media URL without transferring its body.

    A malformed URL fails immediately without any request.  Otherwise a
    HEAD request is sent with a hard timeout; 2xx and 403 count as
    reachable.  Network errors, timeouts and non-terminal statuses are
    retried after a fixed delay until the retry budget is exhausted.

    Args:
        http_client: Shared httpx.AsyncClient (injected).
        timeout_seconds: Hard deadline per attempt (default: 3s).
        max_retries: Additional attempts after the first (default: 2).
        retry_delay_seconds: Fixed pause between attempts (default: 0.5s).
    """

    def __init__(
        self,
        http_client: AsyncClient,
        *,
        timeout_seconds: float = 3.0,
        max_retries: int = 2,
        retry_delay_seconds: float = 0.5,
    ) -> None:
        self.http_client = http_client
        self.timeout = timeout_seconds
        self.max_retries = max_retries
        self.retry_delay = retry_delay_seconds

    async def probe(self, url: str) -> LivenessProbeResult:
        """Probe *url*. Never raises for unreachable URLs."""
        start = time.perf_counter()
        url = url.strip()

        if not is_valid_url_format(url):
            log.debug("probe_invalid_format", url=url)
            return LivenessProbeResult(
                url=url,
                is_reachable=False,
                reason=ProbeFailureReason.FORMAT,
                detail="Invalid URL format",
            )

        attempts = 0
        outcome = _Attempt(reachable=False)
        for attempt in range(1 + self.max_retries):
            attempts += 1
            outcome = await self._try_head(url)
            if outcome.reachable or outcome.is_terminal:
                break
            if attempt < self.max_retries:
                log.debug(
                    "probe_retry",
                    url=url,
                    attempt=attempts,
                    reason=outcome.reason.value if outcome.reason else None,
                    delay=self.retry_delay,
                )
                await asyncio.sleep(self.retry_delay)

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        if not outcome.reachable:
            log.debug(
                "probe_unreachable",
                url=url,
                attempts=attempts,
                reason=outcome.reason.value if outcome.reason else None,
                detail=outcome.detail,
            )
        return LivenessProbeResult(
            url=url,
            is_reachable=outcome.reachable,
            reason=outcome.reason,
            detail=outcome.detail,
            status_code=outcome.status_code,
            elapsed_ms=elapsed_ms,
            attempts=attempts,
        )

    async def _try_head(self, url: str) -> _Attempt:
        """Single HEAD request under a hard deadline."""
        parts = urlsplit(url)
        headers = {
            "User-Agent": _PROBE_USER_AGENT,
            "Referer": f"{parts.scheme}://{parts.netloc}",
        }
        try:
            response = await asyncio.wait_for(
                self.http_client.head(
                    url,
                    headers=headers,
                    timeout=self.timeout,
                    follow_redirects=True,
                ),
                timeout=self.timeout,
            )
        except (TimeoutError, TimeoutException):
            return _Attempt(
                reachable=False,
                reason=ProbeFailureReason.TIMEOUT,
                detail=f"Timed out after {self.timeout}s",
            )
        except HTTPError as e:
            return _Attempt(
                reachable=False,
                reason=ProbeFailureReason.NETWORK,
                detail=str(e) or type(e).__name__,
            )
        except Exception as e:  # noqa: BLE001
            return _Attempt(
                reachable=False,
                reason=ProbeFailureReason.NETWORK,
                detail=str(e) or type(e).__name__,
            )

        status_code = response.status_code
        if _is_reachable_status(status_code):
            log.debug("probe_head_result", url=url, status_code=status_code)
            return _Attempt(reachable=True, status_code=status_code)
        return _Attempt(
            reachable=False,
            reason=ProbeFailureReason.STATUS,
            detail=f"HTTP {status_code}",
            status_code=status_code,
        )
