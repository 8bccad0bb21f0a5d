#!/usr/bin/env python3
"""Command-line interface for the pixel relay.

Commands:
  - pixel-relay replay    : Map a JSON-lines file of storefront events and print canonical events
  - pixel-relay routes    : Show the route table and which routes are enabled
  - pixel-relay validate  : Validate a YAML pixel config

Typical usage:
  pixel-relay replay --events events.jsonl --init init.json
  pixel-relay routes --config pixel.yaml
  pixel-relay validate --config pixel.yaml
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Iterator

from pydantic import ValidationError

from pixel_relay.configs.config import Config
from pixel_relay.configs.settings import Settings
from pixel_relay.dispatcher import CONSENT_NOTIFICATION, EventDispatcher
from pixel_relay.mapping.registry import describe_routes
from pixel_relay.monitoring.logging import LoggingOptions, setup_logging
from pixel_relay.sinks import JsonLinesSink


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="pixel-relay", description="Storefront analytics relay")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    sub = p.add_subparsers(dest="cmd")

    # replay
    pr = sub.add_parser("replay", help="Map recorded storefront events")
    pr.add_argument(
        "--events", "-e", required=True, help="JSON-lines file, one raw event per line"
    )
    pr.add_argument(
        "--init", "-i", default=None, help="JSON file with the storefront init snapshot"
    )
    pr.add_argument("--config", "-c", default=None, help="YAML pixel config")
    pr.add_argument(
        "--out", "-o", default=None, help="Write canonical events here instead of stdout"
    )
    pr.add_argument("--json-logs", action="store_true", help="Emit JSON logs")
    pr.add_argument("--debug", action="store_true", help="Mirror every canonical event to the log")

    # routes
    pro = sub.add_parser("routes", help="Show the route table")
    pro.add_argument("--config", "-c", default=None, help="YAML pixel config")

    # validate
    pv = sub.add_parser("validate", help="Validate a YAML pixel config")
    pv.add_argument("--config", "-c", required=True, help="YAML pixel config")
    pv.add_argument("--verbose", "-v", action="store_true", help="Print the resulting settings")

    return p.parse_args(argv)


def _read_json(path: str) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"File not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        return json.load(f)


def _iter_events(path: str) -> Iterator[dict[str, Any]]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Events file not found: {p}")
    with p.open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            record = json.loads(line)
            if not isinstance(record, dict):
                raise ValueError(f"Line {line_no}: expected a JSON object")
            yield record


def _load_settings(config: str | None) -> Settings:
    return Config.load_settings(Path(config) if config else None)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI with the given arguments."""
    try:
        return _main_impl(argv)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}", file=sys.stderr)
        return 1
    except (ValueError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _main_impl(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    if args.version:
        from pixel_relay import __version__

        print(f"pixel-relay version {__version__}")
        return 0

    if not args.cmd:
        print("Error: Command required. Use --help for usage info.", file=sys.stderr)
        return 1

    if args.cmd == "validate":
        settings = _load_settings(args.config)
        print(f"OK: {args.config}")
        if args.verbose:
            print(json.dumps(settings.model_dump(mode="json"), indent=2, ensure_ascii=False))
        return 0

    if args.cmd == "routes":
        settings = _load_settings(args.config)
        routes = describe_routes(settings.tracking_toggles())

        print(f"{'STOREFRONT EVENT':<36} {'CATEGORY':<12} {'ENABLED':<8} {'MAPPER'}")
        print("-" * 90)
        for name, info in routes.items():
            enabled = "yes" if info["enabled"] else "no"
            print(f"{name:<36} {info['category']:<12} {enabled:<8} {info['mapper']}")
        return 0

    if args.cmd == "replay":
        settings = _load_settings(args.config)
        if args.debug:
            settings = settings.model_copy(update={"DEBUG": True})
        setup_logging(
            LoggingOptions(
                level="DEBUG" if settings.DEBUG else settings.LOG_LEVEL,
                json_logs=args.json_logs or settings.JSON_LOGS,
            )
        )
        init = _read_json(args.init) if args.init else None

        out = open(args.out, "w", encoding="utf-8") if args.out else sys.stdout
        emitted = 0
        try:
            with JsonLinesSink(out) as sink:
                dispatcher = EventDispatcher.from_settings(settings, sink, init=init)
                for record in _iter_events(args.events):
                    name = record.get("name")
                    if name == CONSENT_NOTIFICATION:
                        result = dispatcher.handle_consent(record)
                    else:
                        result = dispatcher.dispatch(str(name), record)
                    if result is not None:
                        emitted += 1
        finally:
            if args.out:
                out.close()

        print(f"Emitted {emitted} records", file=sys.stderr)
        return 0

    print(f"Error: Unknown command '{args.cmd}'", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
