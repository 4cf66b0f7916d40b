"""Error taxonomy for search and detail requests."""

from __future__ import annotations


class KVideoError(Exception):
    """Base error for KVideo domain/use cases."""


class ClientInputError(KVideoError):
    """Missing or invalid query, id or source parameters (4xx)."""


class SourceNotFoundError(ClientInputError):
    """A source id is not known to the registry."""


class UpstreamSourceError(KVideoError):
    """A source's search or detail call failed (network, status, payload)."""

    def __init__(self, message: str, *, source_id: str | None = None) -> None:
        super().__init__(message)
        self.source_id = source_id


class NoPlayableContentError(KVideoError):
    """Detail lookup found no playable episodes after validation."""
