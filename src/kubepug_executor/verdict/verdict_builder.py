"""Translate a parsed kubepug report into a pass/fail execution report."""

from __future__ import annotations

from typing import Iterable

from ..models import (
    AssertionFailure,
    DeletedFinding,
    DeprecatedFinding,
    ExecutionReport,
    ExecutionStatus,
    ExecutionStep,
    ScanReport,
)

DEPRECATED_APIS_STEP = "Deprecated APIs"
DELETED_APIS_STEP = "Deleted APIs"


def build_execution_report(scan: ScanReport, raw_output: str) -> ExecutionReport:
    """Return the execution report for ``scan``; ``raw_output`` is kept verbatim."""

    return ExecutionReport(
        status=result_status(scan),
        raw_output=raw_output,
        steps=(create_deprecated_apis_step(scan), create_deleted_apis_step(scan)),
    )


def create_deprecated_apis_step(scan: ScanReport) -> ExecutionStep:
    """Build the "Deprecated APIs" step from the deprecated findings only."""

    return _build_step(DEPRECATED_APIS_STEP, "Deprecated API", scan.deprecated_apis)


def create_deleted_apis_step(scan: ScanReport) -> ExecutionStep:
    """Build the "Deleted APIs" step from the deleted findings only."""

    return _build_step(DELETED_APIS_STEP, "Deleted API", scan.deleted_apis)


def result_status(scan: ScanReport) -> ExecutionStatus:
    """Any finding in either category fails the execution."""

    if scan.deprecated_apis or scan.deleted_apis:
        return ExecutionStatus.FAILED
    return ExecutionStatus.PASSED


def _build_step(
    step_name: str,
    label: str,
    findings: Iterable[DeprecatedFinding | DeletedFinding],
) -> ExecutionStep:
    # one failure per finding, not per affected object
    failures = tuple(
        AssertionFailure(name=finding.name, error_message=f"{label}:\n {finding}")
        for finding in findings
    )
    if not failures:
        return ExecutionStep(name=step_name, status=ExecutionStatus.PASSED)

    return ExecutionStep(
        name=step_name,
        status=ExecutionStatus.FAILED,
        assertion_failures=failures,
    )
