"""Orchestration layer that runs kubepug and converts its output into an execution report."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Sequence

from .adapters import (
    ArgumentConflictError,
    ContentFetcher,
    ContentFetchError,
    EnvManager,
    FilePlacementError,
    ProcessExecutionError,
    ProcessExecutor,
    build_args,
    place_files,
)
from .models import CopyFile, ExecutionReport, ExecutionRequest
from .parsing import ReportParseError, parse_scan_report
from .verdict import build_execution_report

logger = logging.getLogger(__name__)

FilePlacer = Callable[[Sequence[CopyFile]], List[Path]]


class RunnerError(RuntimeError):
    """Raised when a kubepug run cannot produce an execution report."""


class KubepugRunner:
    """Run kubepug against the requested manifests and derive a pass/fail verdict."""

    def __init__(
        self,
        *,
        fetcher: ContentFetcher | None = None,
        executor: ProcessExecutor | None = None,
        file_placer: FilePlacer | None = None,
        executable: str = "kubepug",
        inherit_environment: bool = True,
    ) -> None:
        self.fetcher = fetcher or ContentFetcher()
        self.executor = executor or ProcessExecutor()
        self.file_placer = file_placer or place_files
        self.executable = executable
        self.inherit_environment = inherit_environment

    # ------------------------------------------------------------------
    def run(self, execution: ExecutionRequest) -> ExecutionReport:
        """Execute kubepug once and return the resulting report.

        Content fetch errors propagate unchanged; every later failure is raised
        as :class:`RunnerError` with the original exception chained. No report is
        returned unless the kubepug output parsed successfully.
        """

        path = self.fetcher.fetch(execution.content)
        logger.info("created content path: %s", path)

        if execution.content.is_file:
            logger.info("using single file: %s", execution.content.type.value)
        if execution.content.is_dir:
            logger.info("using dir: %s", execution.content.type.value)

        try:
            args = build_args(execution.args, path)
        except ArgumentConflictError as exc:
            raise RunnerError(f"could not build up parameters: {exc}") from exc

        try:
            self.file_placer(execution.copy_files)
        except FilePlacementError as exc:
            raise RunnerError(f"could not place config files: {exc}") from exc

        env_manager = EnvManager(
            execution.variables,
            inherit_environment=self.inherit_environment,
        )
        logger.info(
            "running kubepug with arguments: %s",
            env_manager.obfuscate(" ".join(args)),
        )

        try:
            output = self.executor.run(self.executable, args, env=env_manager.environment())
        except ProcessExecutionError as exc:
            # kubepug stderr may echo secrets, so only a redacted copy is chained
            redacted = ProcessExecutionError(
                env_manager.obfuscate(str(exc)),
                returncode=exc.returncode,
                stdout=env_manager.obfuscate(exc.stdout),
                stderr=env_manager.obfuscate(exc.stderr),
            )
            raise RunnerError(f"could not execute kubepug: {redacted}") from redacted
        output = env_manager.obfuscate(output)

        try:
            scan = parse_scan_report(output)
        except ReportParseError as exc:
            raise RunnerError(f"could not parse kubepug execution result: {exc}") from exc

        report = build_execution_report(scan, output)
        logger.info(
            "kubepug execution %s (%d deprecated, %d deleted APIs)",
            report.status.value,
            len(scan.deprecated_apis),
            len(scan.deleted_apis),
        )
        return report


__all__ = ["ContentFetchError", "KubepugRunner", "RunnerError"]
