"""In-memory source registry built from configuration."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from kvideo.domain.entities.catalog import SourceConfig

log = structlog.get_logger(__name__)


class ConfigSourceRegistry:
    """Implements ``SourceRegistryPort`` over a fixed list of sources.

    Order is preserved: ``enabled()`` and ``resolve()`` return sources in
    configuration (or request) order.
    """

    def __init__(self, sources: Iterable[SourceConfig]) -> None:
        self._sources: dict[str, SourceConfig] = {}
        for source in sources:
            if source.id in self._sources:
                log.warning("source_duplicate_id", source=source.id)
                continue
            self._sources[source.id] = source

    def __len__(self) -> int:
        return len(self._sources)

    def get(self, source_id: str) -> SourceConfig | None:
        return self._sources.get(source_id)

    def enabled(self) -> list[SourceConfig]:
        return [s for s in self._sources.values() if s.enabled]

    def resolve(self, source_ids: list[str]) -> list[SourceConfig]:
        """Map ids to enabled sources, skipping unknown ids and repeats."""
        resolved: list[SourceConfig] = []
        seen: set[str] = set()
        for source_id in source_ids:
            source = self._sources.get(source_id)
            if source is None:
                log.debug("source_unknown", source=source_id)
                continue
            if not source.enabled or source_id in seen:
                continue
            seen.add(source_id)
            resolved.append(source)
        return resolved
