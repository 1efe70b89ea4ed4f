"""Execution request and execution report models exchanged with the orchestrator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple


class ExecutionStatus(str, Enum):
    """Verdict of a whole execution or a single step."""

    PASSED = "passed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class AssertionFailure:
    """A single failed assertion reported inside a step."""

    name: str
    error_message: str
    status: ExecutionStatus = ExecutionStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "errorMessage": self.error_message,
        }


@dataclass(frozen=True, slots=True)
class ExecutionStep:
    """One named verdict category of an execution report."""

    name: str
    status: ExecutionStatus
    assertion_failures: Tuple[AssertionFailure, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "assertionResults": [failure.to_dict() for failure in self.assertion_failures],
        }


@dataclass(frozen=True, slots=True)
class ExecutionReport:
    """Final artifact handed back to the orchestrating platform."""

    status: ExecutionStatus
    raw_output: str
    steps: Tuple[ExecutionStep, ...]

    @property
    def passed(self) -> bool:
        return self.status is ExecutionStatus.PASSED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "output": self.raw_output,
            "steps": [step.to_dict() for step in self.steps],
        }


class ContentType(str, Enum):
    """Supported sources for the manifests under test."""

    STRING = "string"
    FILE = "file"
    DIR = "dir"
    FILE_URI = "file-uri"
    GIT_FILE = "git-file"
    GIT_DIR = "git-dir"


@dataclass(frozen=True, slots=True)
class Repository:
    """Location of manifests inside a git repository."""

    uri: str
    branch: str = ""
    commit: str = ""
    path: str = ""
    username: str = ""
    token: str = ""


@dataclass(frozen=True, slots=True)
class TestContent:
    """Descriptor of the manifests that kubepug should inspect."""

    __test__ = False  # keep pytest from collecting this class

    type: ContentType
    data: str = ""
    uri: str = ""
    path: Optional[Path] = None
    repository: Optional[Repository] = None

    @property
    def is_file(self) -> bool:
        return self.type in {
            ContentType.STRING,
            ContentType.FILE,
            ContentType.FILE_URI,
            ContentType.GIT_FILE,
        }

    @property
    def is_dir(self) -> bool:
        return self.type in {ContentType.DIR, ContentType.GIT_DIR}


class VariableType(str, Enum):
    """Kind of execution variable."""

    BASIC = "basic"
    SECRET = "secret"


@dataclass(frozen=True, slots=True)
class Variable:
    """Environment variable exposed to the kubepug process."""

    name: str
    value: str = ""
    type: VariableType = VariableType.BASIC

    @property
    def is_secret(self) -> bool:
        return self.type is VariableType.SECRET


@dataclass(frozen=True, slots=True)
class CopyFile:
    """Auxiliary file that must be present on disk before kubepug runs."""

    source: Path
    destination: Path


@dataclass(frozen=True, slots=True)
class ExecutionRequest:
    """Everything needed to run kubepug once."""

    content: TestContent
    args: Tuple[str, ...] = ()
    variables: Tuple[Variable, ...] = ()
    copy_files: Tuple[CopyFile, ...] = ()
