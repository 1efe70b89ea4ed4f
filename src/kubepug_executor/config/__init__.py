"""Execution definition loading."""

from .execution_loader import ExecutionConfigError, ExecutionLoader

__all__ = ["ExecutionConfigError", "ExecutionLoader"]
