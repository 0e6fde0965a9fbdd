"""dscript command-line interface."""

from __future__ import annotations

import argparse
import ast
import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Sequence

from dscript.dsl.checker import TypeMismatch
from dscript.telemetry import logger as telemetry_logger

from . import pipeline
from .types import ToolchainConfig

DEFAULT_CONFIG_PATH = pipeline.DEFAULT_CONFIG_PATH


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dscript", description="Type check typed dscript sources and run them as JavaScript"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else None,
        help="Optional path to a toolchain configuration YAML file.",
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        metavar="KEY=VALUE",
        help="Override configuration values using dot notation (e.g. runtime.timeout=5).",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log pipeline activity to stderr."
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Check a source file and execute it")
    run.add_argument("source", type=Path, help="Path to the dscript source file")

    compile_ = subparsers.add_parser("compile", help="Check a source file and write JavaScript")
    compile_.add_argument("source", type=Path, help="Path to the dscript source file")
    compile_.add_argument(
        "-o", "--output", type=Path, help="Output path (defaults to the source name with .js)"
    )

    check = subparsers.add_parser("check", help="Only type check a source file")
    check.add_argument("source", type=Path, help="Path to the dscript source file")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.verbose:
        telemetry_logger.set_level(logging.INFO)

    try:
        overrides = _parse_overrides(args.overrides)
        config = pipeline.load_configuration(args.config, overrides=overrides)
        if args.command == "run":
            return _cmd_run(args, config)
        if args.command == "compile":
            return _cmd_compile(args, config)
        if args.command == "check":
            return _cmd_check(args)
    except Exception as exc:
        print(f"[dscript] error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


# ---------------------------------------------------------------------------
# Command implementations


def _cmd_run(args: argparse.Namespace, config: ToolchainConfig) -> int:
    status = pipeline.run_file(args.source, config=config, on_diagnostic=_report)
    if status is None:
        return 1
    if status != 0:
        print(f"Execution failed with exit code {status}", file=sys.stderr)
    return status


def _cmd_compile(args: argparse.Namespace, config: ToolchainConfig) -> int:
    written = pipeline.compile_file(
        args.source, args.output, config=config, on_diagnostic=_report
    )
    if written is None:
        return 1
    print(f"Compiled {args.source} -> {written}")
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    result = pipeline.check_file(args.source, on_diagnostic=_report)
    if not result.ok:
        return 1
    print(f"[dscript] {args.source}: no type errors")
    return 0


# ---------------------------------------------------------------------------
# Helpers


def _report(mismatch: TypeMismatch) -> None:
    print(mismatch.message, file=sys.stderr, flush=True)


def _parse_overrides(raw: Sequence[str] | None) -> Mapping[str, Any]:
    overrides: dict[str, Any] = {}
    if not raw:
        return overrides
    for item in raw:
        key, sep, value_text = item.partition("=")
        if not sep:
            raise ValueError(f"override '{item}' is missing '='")
        key_parts = [part for part in key.split(".") if part]
        if not key_parts:
            raise ValueError("override key must not be empty")
        value = _coerce_literal(value_text)
        cursor = overrides
        for part in key_parts[:-1]:
            cursor = cursor.setdefault(part, {})
            if not isinstance(cursor, dict):
                raise ValueError(f"override '{key}' conflicts with an existing value")
        cursor[key_parts[-1]] = value
    return overrides


def _coerce_literal(value: str) -> Any:
    try:
        return ast.literal_eval(value)
    except (ValueError, SyntaxError):
        return value


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
