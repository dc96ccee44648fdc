"""Location stock CLI exposing the service router and config tooling."""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from typing import Sequence

from . import __version__
from .availability.config_resolver import load_raw_config, resolve_config
from .config import constants, settings


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _load_service_main(name: str):
    module = importlib.import_module(f"location_stock.services.{name}")
    return getattr(module, "main")


def _ensure_settings() -> None:
    _ = settings.get_settings()


def _resolve_config_file(path: str) -> int:
    if path == "-":
        text = sys.stdin.read()
    else:
        try:
            with open(path, "r", encoding="utf-8") as handle:
                text = handle.read()
        except OSError as exc:
            print(f"cannot read {path}: {exc}", file=sys.stderr)
            return 2
    config = resolve_config(load_raw_config(text))
    print(json.dumps(config.to_json(), ensure_ascii=False, indent=2))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = argparse.ArgumentParser(prog="location-stock")
    parser.add_argument(
        "--version",
        action="version",
        version=f"location_stock {__version__}",
        help="Show version",
    )
    subparsers = parser.add_subparsers(dest="command", required=False)
    service_parser = subparsers.add_parser("service", help="Run a service by name")
    service_parser.add_argument(
        "--name",
        choices=constants.SERVICE_NAMES,
        required=True,
        help="Service to start",
    )
    service_parser.add_argument(
        "service_args",
        nargs=argparse.REMAINDER,
        help="Arguments forwarded to the service",
    )
    resolve_parser = subparsers.add_parser(
        "resolve-config",
        help="Print the fully resolved config for a stored JSON value",
    )
    resolve_parser.add_argument("path", help="JSON file, or - for stdin")

    args = parser.parse_args(argv)
    if args.command == "service":
        _configure_logging()
        _ensure_settings()
        service_main = _load_service_main(args.name)
        forwarded = args.service_args
        if forwarded and forwarded[0] == "--":
            forwarded = forwarded[1:]
        service_main(forwarded)
        return 0
    if args.command == "resolve-config":
        _configure_logging()
        return _resolve_config_file(args.path)
    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
