"""Port for source configuration lookup."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from kvideo.domain.entities.catalog import SourceConfig


@runtime_checkable
class SourceRegistryPort(Protocol):
    """Synchronous lookup of configured sources by id."""

    def get(self, source_id: str) -> SourceConfig | None: ...
    def enabled(self) -> list[SourceConfig]: ...
    def resolve(self, source_ids: list[str]) -> list[SourceConfig]: ...
