"""Tests for CLI argument handling."""

from __future__ import annotations

import pytest

from kvideo.interfaces.cli.cli import _parse_args, build_cli_overrides


def test_no_flags_give_empty_overrides() -> None:
    assert build_cli_overrides(_parse_args([])) == {}


def test_given_flags_become_flat_overrides() -> None:
    args = _parse_args(
        ["--environment", "prod", "--log-level", "DEBUG", "--log-format", "console"]
    )
    assert build_cli_overrides(args) == {
        "environment": "prod",
        "log_level": "DEBUG",
        "log_format": "console",
    }


def test_server_flags_are_not_config_overrides() -> None:
    args = _parse_args(["--host", "127.0.0.1", "--port", "8080"])
    assert args.host == "127.0.0.1"
    assert args.port == 8080
    assert build_cli_overrides(args) == {}


def test_invalid_choice_exits() -> None:
    with pytest.raises(SystemExit):
        _parse_args(["--environment", "staging"])
