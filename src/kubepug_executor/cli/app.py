"""Command-line interface implementation for the kubepug executor."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Mapping, Sequence

from ..adapters import ContentFetchError
from ..config import ExecutionConfigError, ExecutionLoader
from ..models import (
    ContentType,
    ExecutionReport,
    ExecutionRequest,
    TestContent,
    Variable,
    VariableType,
)
from ..runner import KubepugRunner, RunnerError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_EXECUTABLE = "kubepug"

logger = logging.getLogger(__name__)


def render_table(report: ExecutionReport) -> str:
    """Render the execution report as a text table for terminal output."""

    headers = ("Step", "Status", "Assertion", "Message")
    rows = [headers]
    for step in report.steps:
        if not step.assertion_failures:
            rows.append((step.name, step.status.value, "-", "-"))
            continue
        for failure in step.assertion_failures:
            summary = failure.error_message.splitlines()
            message = summary[1].strip() if len(summary) > 1 else failure.error_message
            rows.append((step.name, failure.status.value, failure.name or "-", message))

    widths = [max(len(str(row[idx])) for row in rows) for idx in range(len(headers))]

    def format_row(values: tuple[str, str, str, str]) -> str:
        return "  ".join(value.ljust(width) for value, width in zip(values, widths, strict=True))

    lines = [format_row(headers)]
    lines.append("  ".join("=" * width for width in widths))
    for row in rows[1:]:
        lines.append(format_row(row).rstrip())
    lines.append("")
    lines.append(f"Execution {report.status.value}.")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser."""

    parser = argparse.ArgumentParser(
        prog="kubepug-executor",
        description="Run kubepug against Kubernetes manifests and report deprecated APIs.",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "INFO"),
        help="Logging level for executor events written to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser(
        "run", help="Scan manifests with kubepug and print the execution report."
    )
    run_parser.add_argument(
        "definitions",
        type=Path,
        nargs="*",
        help="Execution definition files (YAML or JSON) merged in the given order.",
    )
    content_group = run_parser.add_mutually_exclusive_group()
    content_group.add_argument(
        "--content-string",
        default=None,
        help="Manifest content passed inline.",
    )
    content_group.add_argument(
        "--content-file",
        type=Path,
        default=None,
        help="Path to a local manifest file.",
    )
    content_group.add_argument(
        "--content-dir",
        type=Path,
        default=None,
        help="Path to a local directory of manifests.",
    )
    content_group.add_argument(
        "--content-uri",
        default=None,
        help="URI of a manifest file to download.",
    )
    run_parser.add_argument(
        "--arg",
        dest="args",
        action="append",
        default=None,
        metavar="ARG",
        help="Extra argument passed to kubepug, e.g. --arg=--k8s-version=v1.22.0.",
    )
    run_parser.add_argument(
        "--variable",
        dest="variables",
        action="append",
        default=None,
        metavar="KEY=VALUE",
        help="Environment variable exposed to kubepug.",
    )
    run_parser.add_argument(
        "--secret",
        dest="secrets",
        action="append",
        default=None,
        metavar="KEY=VALUE",
        help="Secret environment variable exposed to kubepug and redacted from output.",
    )
    run_parser.add_argument(
        "--kubepug-bin",
        default=os.environ.get("KUBEPUG_BIN", DEFAULT_EXECUTABLE),
        help="Name or path of the kubepug executable.",
    )
    run_parser.add_argument(
        "--no-inherit-env",
        dest="inherit_env",
        action="store_false",
        default=True,
        help="Run kubepug with a PATH-only environment plus declared variables.",
    )
    run_parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        help="Output format for the execution report.",
    )

    return parser


def create_runner(
    *, executable: str = DEFAULT_EXECUTABLE, inherit_environment: bool = True
) -> KubepugRunner:
    """Create a runner using the default subprocess and content adapters."""

    return KubepugRunner(executable=executable, inherit_environment=inherit_environment)


def configure_logging(level: str) -> None:
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, stream=sys.stderr)


def _parse_env_values(values: Sequence[str] | None) -> Mapping[str, str]:
    if not values:
        return {}

    env: dict[str, str] = {}
    for value in values:
        if "=" not in value:
            raise ValueError(f"Variables must be in KEY=VALUE form: {value}")
        key, raw = value.split("=", 1)
        env[key] = raw
    return env


def _content_from_args(args: argparse.Namespace) -> TestContent | None:
    if args.content_string is not None:
        return TestContent(type=ContentType.STRING, data=args.content_string)
    if args.content_file is not None:
        return TestContent(type=ContentType.FILE, path=args.content_file.resolve())
    if args.content_dir is not None:
        return TestContent(type=ContentType.DIR, path=args.content_dir.resolve())
    if args.content_uri is not None:
        return TestContent(type=ContentType.FILE_URI, uri=args.content_uri)
    return None


def build_request(args: argparse.Namespace) -> ExecutionRequest:
    """Combine definition files with command line overrides."""

    variables: List[Variable] = [
        Variable(name=key, value=value)
        for key, value in _parse_env_values(args.variables).items()
    ]
    variables.extend(
        Variable(name=key, value=value, type=VariableType.SECRET)
        for key, value in _parse_env_values(args.secrets).items()
    )
    content = _content_from_args(args)

    if args.definitions:
        request = ExecutionLoader().load(args.definitions, fallback_content=content)
    elif content is not None:
        request = ExecutionRequest(content=content)
    else:
        raise ValueError("Provide an execution definition file or a --content-* option")

    merged = {variable.name: variable for variable in request.variables}
    merged.update((variable.name, variable) for variable in variables)

    return dataclasses.replace(
        request,
        content=content or request.content,
        args=(*request.args, *(args.args or [])),
        variables=tuple(merged.values()),
    )


def _handle_run(args: argparse.Namespace) -> int:
    try:
        request = build_request(args)
    except (ValueError, ExecutionConfigError) as exc:
        print(f"Error: {exc}")
        return 2

    runner = create_runner(executable=args.kubepug_bin, inherit_environment=args.inherit_env)

    try:
        report = runner.run(request)
    except (ContentFetchError, RunnerError) as exc:
        logger.debug("kubepug run failed", exc_info=True)
        print(f"Error: {exc}")
        return 2

    if args.format == "json":
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print(render_table(report))

    return 0 if report.passed else 1


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point used by tests and the ``python -m`` invocation."""

    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "run":
        return _handle_run(args)

    parser.print_help()
    return 0


def run() -> None:  # pragma: no cover - thin wrapper for module execution
    """Execute the CLI and exit with the produced status code."""

    raise SystemExit(main())


if __name__ == "__main__":  # pragma: no cover - module execution guard
    run()
