"""``aniresolve`` console script: load config, set up logging, serve."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
import uvicorn

from aniresolve.infrastructure.config import load_config
from aniresolve.infrastructure.logging.setup import configure_logging
from aniresolve.interfaces.app import create_app

log = structlog.get_logger(__name__)

_DEFAULT_HOST = "0.0.0.0"
_DEFAULT_PORT = 8787


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="aniresolve",
        description="Serve anime metadata, episode lists and stream URLs.",
    )

    bind = parser.add_argument_group("server")
    bind.add_argument("--host", help=f"interface to bind (env HOST, default {_DEFAULT_HOST})")
    bind.add_argument("--port", type=int, help=f"port to bind (env PORT, default {_DEFAULT_PORT})")

    cfg = parser.add_argument_group("configuration")
    cfg.add_argument("--config", type=Path, metavar="YAML", help="YAML config file")
    cfg.add_argument("--dotenv", type=Path, metavar="FILE", help=".env file to load")
    cfg.add_argument("--log-level", choices=("DEBUG", "INFO", "WARNING", "ERROR"))
    cfg.add_argument("--log-format", choices=("json", "console"))
    cfg.add_argument(
        "--concurrent-probe",
        action="store_true",
        help="HEAD every mirror at once; the highest-priority live one still wins",
    )

    return parser.parse_args(list(argv) if argv is not None else None)


def build_cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Flat config overrides for the flags that were actually given."""
    given = {
        "log_level": args.log_level,
        "log_format": args.log_format,
        "concurrent_probe": True if args.concurrent_probe else None,
    }
    return {key: value for key, value in given.items() if value is not None}


def _bind_address(args: argparse.Namespace) -> tuple[str, int]:
    host = args.host or os.getenv("HOST") or _DEFAULT_HOST
    port = args.port or int(os.getenv("PORT") or _DEFAULT_PORT)
    return host, port


def start(argv: Iterable[str] | None = None) -> None:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    host, port = _bind_address(args)

    config = load_config(
        config_path=args.config,
        dotenv_path=args.dotenv,
        cli_overrides=build_cli_overrides(args),
    )
    log_config = configure_logging(config)
    log.info("server_starting", host=host, port=port, environment=config.environment)

    uvicorn.run(create_app(config), host=host, port=port, log_config=log_config)


if __name__ == "__main__":
    raise SystemExit(start())
