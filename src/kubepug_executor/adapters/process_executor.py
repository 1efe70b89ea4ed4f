"""Blocking subprocess invocation of the kubepug binary."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


class ProcessExecutionError(RuntimeError):
    """Raised when an executable is missing or exits with a non-zero status."""

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class ProcessExecutor:
    """Run an executable once and return its captured standard output."""

    def run(
        self,
        executable: str,
        args: Sequence[str],
        *,
        env: Optional[Mapping[str, str]] = None,
        cwd: str | os.PathLike[str] | None = None,
    ) -> str:
        command = [executable, *args]
        try:
            completed = subprocess.run(  # noqa: S603 - executable is operator configured
                command,
                cwd=Path(cwd) if cwd else None,
                env=dict(env) if env is not None else None,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as exc:
            raise ProcessExecutionError(f"Executable not found: {executable}") from exc

        if completed.returncode != 0:
            stderr = (completed.stderr or "").strip()
            message = f"{executable} failed with exit code {completed.returncode}"
            if stderr:
                message = f"{message}: {stderr}"
            raise ProcessExecutionError(
                message,
                returncode=completed.returncode,
                stdout=completed.stdout or "",
                stderr=completed.stderr or "",
            )

        logger.debug("%s exited successfully", executable)
        return completed.stdout or ""
