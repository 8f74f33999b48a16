"""CLI entrypoint for firing manifest-defined listener chains."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path

import yaml

from hookchain.chain import ListenerChain
from hookchain.config import ChainManifest, load_manifest
from hookchain.consensus import summarize_results
from hookchain.errors import ChainError
from hookchain.loader import build_chain
from hookchain.logging_utils import configure_logging

logger = logging.getLogger(__name__)


def _load_yaml_dict(path: str | None) -> dict | None:
    if not path:
        return None
    data = yaml.safe_load(Path(path).read_text())
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValueError(f"YAML at {path} must decode to a mapping")
    return data


def _load(args: argparse.Namespace) -> tuple[ChainManifest, ListenerChain]:
    manifest = load_manifest(args.manifest, runtime_override=_load_yaml_dict(args.runtime_override))
    configure_logging(args.log_level or manifest.log_level, trace_listeners=args.trace_listeners)
    return manifest, build_chain(manifest)


def _add_manifest_flags(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("manifest", help="Path to chain manifest YAML")
    cmd.add_argument("--runtime-override", help="Optional runtime override YAML")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ordered listener chain runner")
    parser.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument("--trace-listeners", action="store_true", help="Log every listener invocation")

    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Fire the chain once with string arguments")
    _add_manifest_flags(run)
    run.add_argument("args", nargs="*", help="Arguments passed to every listener")
    run.add_argument("--join", action="store_true", help="Print the tri-state consensus instead of raw results")
    run.add_argument("--summary", action="store_true", help="Print the consensus with bucket counts (implies --join)")

    describe = sub.add_parser("describe", help="Print listener keys in firing order")
    _add_manifest_flags(describe)
    describe.add_argument("--json", action="store_true", help="Emit JSON instead of one key per line")

    return parser


def _run_fire(args: argparse.Namespace) -> int:
    manifest, chain = _load(args)
    try:
        results = asyncio.run(chain.fire(*args.args))
    except Exception as exc:
        logger.error("Chain %s failed: %s", manifest.name, exc)
        return 1

    if args.summary:
        summary = summarize_results(results)
        print(json.dumps({**summary.model_dump(), "others": summary.others}, indent=2))
    elif args.join:
        print(json.dumps(summarize_results(results).outcome))
    else:
        print(json.dumps(results, indent=2, default=str))
    logger.info("Chain %s fired: listeners=%s", manifest.name, len(results))
    return 0


def _run_describe(args: argparse.Namespace) -> int:
    manifest, chain = _load(args)
    if args.json:
        print(json.dumps({"name": manifest.name, "keys": chain.keys()}, indent=2))
        return 0
    for key in chain.keys():
        print(key)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "run":
            return _run_fire(args)
        if args.command == "describe":
            return _run_describe(args)
    except (ChainError, ValueError) as exc:
        configure_logging(args.log_level or "INFO")
        logger.error("%s", exc)
        return 2

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
