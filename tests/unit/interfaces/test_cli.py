"""Tests for the CLI entrypoint."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from aniresolve.interfaces.cli.cli import _parse_args, build_cli_overrides, start


class TestBuildCliOverrides:
    def test_no_flags(self) -> None:
        assert build_cli_overrides(_parse_args([])) == {}

    def test_logging_flags(self) -> None:
        args = _parse_args(["--log-level", "DEBUG", "--log-format", "json"])
        assert build_cli_overrides(args) == {"log_level": "DEBUG", "log_format": "json"}

    def test_concurrent_probe(self) -> None:
        args = _parse_args(["--concurrent-probe"])
        assert build_cli_overrides(args) == {"concurrent_probe": True}


class TestStart:
    def test_runs_uvicorn_with_loaded_config(self, monkeypatch) -> None:
        monkeypatch.delenv("HOST", raising=False)
        monkeypatch.delenv("PORT", raising=False)
        with (
            patch("aniresolve.interfaces.cli.cli.uvicorn") as uv,
            patch(
                "aniresolve.interfaces.cli.cli.configure_logging",
                return_value={"version": 1},
            ),
            patch("aniresolve.interfaces.cli.cli.create_app") as factory,
        ):
            factory.return_value = MagicMock()
            start(["--port", "9000", "--log-level", "WARNING"])

        config = factory.call_args.args[0]
        assert config.log_level == "WARNING"
        uv.run.assert_called_once_with(
            factory.return_value,
            host="0.0.0.0",
            port=9000,
            log_config={"version": 1},
        )
