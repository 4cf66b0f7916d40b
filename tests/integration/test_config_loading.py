"""Integration tests for configuration loading with layered precedence.

Tests the real load_config() function with actual YAML files, environment
variables, and CLI overrides to verify precedence: defaults < YAML < ENV < CLI.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from kvideo.infrastructure.config.load import load_config

pytestmark = pytest.mark.integration


@pytest.fixture()
def yaml_config(tmp_path: Path) -> Path:
    """Write a minimal YAML config and return its path."""
    config = {
        "app_name": "kvideo-test",
        "environment": "test",
        "http": {
            "timeout_seconds": 15.0,
            "user_agent": "TestAgent/1.0",
        },
        "probe": {"timeout_seconds": 1.5, "max_retries": 0},
        "search": {"sample_videos": 2},
        "logging": {"level": "DEBUG", "format": "console"},
        "sources": [
            {
                "id": "alpha",
                "name": "Alpha",
                "base_url": "https://alpha.example.com/api.php/provide/vod",
            },
            {
                "id": "beta",
                "name": "Beta",
                "base_url": "https://beta.example.com/api.php/provide/vod",
                "enabled": False,
            },
        ],
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump(config), encoding="utf-8")
    return path


class TestDefaultsOnly:
    """Load with no YAML, no ENV, no CLI: pure defaults."""

    def test_defaults_produce_valid_config(self) -> None:
        config = load_config()
        assert config.app_name == "kvideo"
        assert config.environment == "dev"
        assert config.http_timeout_seconds == 10.0
        assert config.log_level == "INFO"
        assert config.log_format == "console"  # dev -> console
        assert config.probe.timeout_seconds == 3.0
        assert config.probe.max_retries == 2
        assert config.search.sample_videos == 3
        assert config.search.unavailable_ttl_seconds == 0.0

    def test_default_sources_are_present(self) -> None:
        config = load_config()
        ids = [s.id for s in config.sources]
        assert ids[0] == "custom_0"
        assert len(ids) == len(set(ids))
        assert all(s.base_url.startswith("http") for s in config.sources)

    def test_defaults_derive_log_format_from_environment(self) -> None:
        config = load_config(cli_overrides={"environment": "prod"})
        assert config.log_format == "json"


class TestYamlOverrides:
    """YAML values override defaults."""

    def test_yaml_overrides_defaults(self, yaml_config: Path) -> None:
        config = load_config(config_path=yaml_config)
        assert config.app_name == "kvideo-test"
        assert config.environment == "test"
        assert config.http_timeout_seconds == 15.0
        assert config.http_user_agent == "TestAgent/1.0"
        assert config.log_level == "DEBUG"
        assert config.probe.timeout_seconds == 1.5
        assert config.probe.max_retries == 0
        assert config.search.sample_videos == 2

    def test_yaml_sources_replace_defaults(self, yaml_config: Path) -> None:
        config = load_config(config_path=yaml_config)
        assert [s.id for s in config.sources] == ["alpha", "beta"]
        assert config.source_configs()[1].enabled is False

    def test_yaml_file_not_found_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(config_path=tmp_path / "nonexistent.yaml")

    def test_yaml_partial_override_preserves_defaults(self, tmp_path: Path) -> None:
        """YAML that only sets probe.retry_delay_seconds keeps other defaults."""
        path = tmp_path / "partial.yaml"
        path.write_text(
            yaml.dump({"probe": {"retry_delay_seconds": 0.1}}), encoding="utf-8"
        )

        config = load_config(config_path=path)
        assert config.probe.retry_delay_seconds == 0.1
        assert config.probe.timeout_seconds == 3.0  # default preserved
        assert config.app_name == "kvideo"  # default preserved

    def test_non_mapping_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_config(config_path=path)

    def test_duplicate_source_ids_rejected(self, tmp_path: Path) -> None:
        entry = {"id": "dup", "name": "Dup", "base_url": "https://d.example.com"}
        path = tmp_path / "dup.yaml"
        path.write_text(yaml.dump({"sources": [entry, entry]}), encoding="utf-8")
        with pytest.raises(ValidationError, match="duplicate source ids"):
            load_config(config_path=path)

    def test_non_http_base_url_rejected(self, tmp_path: Path) -> None:
        entry = {"id": "x", "name": "X", "base_url": "ftp://x.example.com"}
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.dump({"sources": [entry]}), encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(config_path=path)


class TestEnvOverrides:
    """Environment variables override YAML and defaults."""

    def test_env_overrides_yaml(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("KVIDEO_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("KVIDEO_PROBE_TIMEOUT_SECONDS", "4.5")
        monkeypatch.setenv("KVIDEO_SEARCH_SAMPLE_VIDEOS", "5")

        config = load_config(config_path=yaml_config)
        assert config.log_level == "WARNING"
        assert config.probe.timeout_seconds == 4.5
        assert config.search.sample_videos == 5
        # YAML values not overridden by ENV stay
        assert config.app_name == "kvideo-test"
        assert config.probe.max_retries == 0

    def test_env_overrides_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KVIDEO_ENVIRONMENT", "prod")

        config = load_config()
        assert config.environment == "prod"
        assert config.log_format == "json"  # prod -> json

    def test_dotenv_file_feeds_env_layer(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("KVIDEO_HTTP_TIMEOUT_SECONDS", raising=False)
        dotenv = tmp_path / ".env"
        dotenv.write_text("KVIDEO_HTTP_TIMEOUT_SECONDS=42\n", encoding="utf-8")
        try:
            config = load_config(dotenv_path=dotenv)
            assert config.http_timeout_seconds == 42.0
        finally:
            os.environ.pop("KVIDEO_HTTP_TIMEOUT_SECONDS", None)

    def test_missing_dotenv_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(dotenv_path=tmp_path / "missing.env")


class TestCliOverrides:
    """CLI overrides beat everything (highest precedence)."""

    def test_cli_overrides_yaml_and_env(
        self, yaml_config: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("KVIDEO_LOG_LEVEL", "WARNING")

        config = load_config(
            config_path=yaml_config,
            cli_overrides={"log_level": "ERROR"},
        )
        assert config.log_level == "ERROR"

    def test_cli_overrides_with_sectioned_format(self, yaml_config: Path) -> None:
        config = load_config(
            config_path=yaml_config,
            cli_overrides={"probe": {"total_slots": 4}},
        )
        assert config.probe.total_slots == 4
        assert config.probe.timeout_seconds == 1.5  # YAML preserved

    def test_cli_overrides_defaults_without_yaml(self) -> None:
        config = load_config(
            cli_overrides={"app_name": "custom-app", "environment": "prod"},
        )
        assert config.app_name == "custom-app"
        assert config.environment == "prod"
        assert config.log_format == "json"

    def test_invalid_override_value_rejected(self) -> None:
        with pytest.raises(ValidationError):
            load_config(cli_overrides={"probe_total_slots": 0})
