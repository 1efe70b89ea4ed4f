"""Verdict derivation for kubepug scan reports."""

from .verdict_builder import (
    DELETED_APIS_STEP,
    DEPRECATED_APIS_STEP,
    build_execution_report,
    create_deleted_apis_step,
    create_deprecated_apis_step,
    result_status,
)

__all__ = [
    "DELETED_APIS_STEP",
    "DEPRECATED_APIS_STEP",
    "build_execution_report",
    "create_deleted_apis_step",
    "create_deprecated_apis_step",
    "result_status",
]
