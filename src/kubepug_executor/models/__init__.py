"""Data models for kubepug scan reports and executor results."""

from .execution import (
    AssertionFailure,
    ContentType,
    CopyFile,
    ExecutionReport,
    ExecutionRequest,
    ExecutionStatus,
    ExecutionStep,
    Repository,
    TestContent,
    Variable,
    VariableType,
)
from .scan import AffectedObject, DeletedFinding, DeprecatedFinding, ObjectScope, ScanReport

__all__ = [
    "AffectedObject",
    "AssertionFailure",
    "ContentType",
    "CopyFile",
    "DeletedFinding",
    "DeprecatedFinding",
    "ExecutionReport",
    "ExecutionRequest",
    "ExecutionStatus",
    "ExecutionStep",
    "ObjectScope",
    "Repository",
    "ScanReport",
    "TestContent",
    "Variable",
    "VariableType",
]
