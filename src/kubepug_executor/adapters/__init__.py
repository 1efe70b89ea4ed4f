"""Adapter layer wrapping the collaborators kubepug runs depend on."""

from .arguments import RESERVED_FLAGS, ArgumentConflictError, build_args
from .content_fetcher import ContentFetcher, ContentFetchError
from .env_manager import EnvManager
from .file_placer import FilePlacementError, place_files
from .process_executor import ProcessExecutionError, ProcessExecutor

__all__ = [
    "RESERVED_FLAGS",
    "ArgumentConflictError",
    "ContentFetchError",
    "ContentFetcher",
    "EnvManager",
    "FilePlacementError",
    "ProcessExecutionError",
    "ProcessExecutor",
    "build_args",
    "place_files",
]
