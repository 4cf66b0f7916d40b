"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from kvideo.domain.entities.catalog import (
    DEFAULT_DETAIL_TEMPLATE,
    DEFAULT_SEARCH_TEMPLATE,
    SourceConfig,
)

from .defaults import DEFAULT_SOURCES

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


class SourceEntry(BaseModel):
    """One configured upstream provider (YAML: ``sources[]``)."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    base_url: str = Field(min_length=1)
    search_template: str = DEFAULT_SEARCH_TEMPLATE
    detail_template: str = DEFAULT_DETAIL_TEMPLATE
    enabled: bool = True

    @field_validator("base_url")
    @classmethod
    def _validate_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must be an http(s) URL")
        return v

    def to_source_config(self) -> SourceConfig:
        return SourceConfig(
            id=self.id,
            name=self.name,
            base_url=self.base_url,
            search_template=self.search_template,
            detail_template=self.detail_template,
            enabled=self.enabled,
        )


class ProbeConfig(BaseModel):
    """Media URL liveness probing (YAML section: probe.*)."""

    timeout_seconds: float = Field(
        default=3.0,
        gt=0,
        description="Hard deadline per HEAD attempt (seconds).",
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        description="Additional attempts after the first one.",
    )
    retry_delay_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Fixed pause between attempts (seconds).",
    )
    total_slots: int = Field(
        default=32,
        ge=1,
        description="Global cap on in-flight probes across all requests.",
    )


class SearchConfig(BaseModel):
    """Search aggregation and validation sampling (YAML section: search.*)."""

    source_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Per-source search timeout (seconds).",
    )
    sample_videos: int = Field(
        default=3,
        ge=1,
        description="Videos sampled per source for the availability check.",
    )
    episode_sample_size: int = Field(
        default=3,
        ge=1,
        description="Episodes probed per detail request.",
    )
    episode_max_concurrent: int = Field(
        default=5,
        ge=1,
        description="Max in-flight episode probes per detail request.",
    )
    unavailable_ttl_seconds: float = Field(
        default=0.0,
        ge=0,
        description="Remember unavailable source verdicts (seconds). 0 = off.",
    )


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/probe/search/logging/sources).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="kvideo", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # Upstream HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="HTTP timeout in seconds for upstream source APIs.",
    )
    http_user_agent: str = Field(
        default="Mozilla/5.0 (compatible; KVideo/0.1.0)",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for upstream source API requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)

    sources: list[SourceEntry] = Field(
        default_factory=lambda: [SourceEntry(**s) for s in DEFAULT_SOURCES],
        description="Configured upstream providers, in display order.",
    )

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("sources")
    @classmethod
    def _validate_unique_sources(cls, v: list[SourceEntry]) -> list[SourceEntry]:
        ids = [s.id for s in v]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"duplicate source ids: {', '.join(duplicates)}")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def source_configs(self) -> list[SourceConfig]:
        return [s.to_source_config() for s in self.sources]


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read KVIDEO_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - KVIDEO_ENVIRONMENT
    - KVIDEO_HTTP_TIMEOUT_SECONDS
    - KVIDEO_PROBE_TIMEOUT_SECONDS
    - KVIDEO_SEARCH_SOURCE_TIMEOUT_SECONDS
    - KVIDEO_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="KVIDEO_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None

    probe_timeout_seconds: Optional[float] = None
    probe_max_retries: Optional[int] = None
    probe_retry_delay_seconds: Optional[float] = None
    probe_total_slots: Optional[int] = None

    search_source_timeout_seconds: Optional[float] = None
    search_sample_videos: Optional[int] = None
    search_episode_sample_size: Optional[int] = None
    search_episode_max_concurrent: Optional[int] = None
    search_unavailable_ttl_seconds: Optional[float] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
