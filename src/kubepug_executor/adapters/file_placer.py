from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List, Sequence

from ..models import CopyFile

logger = logging.getLogger(__name__)


class FilePlacementError(RuntimeError):
    """Raised when an auxiliary file cannot be copied into place."""


def place_files(copy_files: Sequence[CopyFile]) -> List[Path]:
    """Copy every auxiliary file to its destination and return the placed paths."""

    placed: List[Path] = []
    for copy_file in copy_files:
        source = Path(copy_file.source)
        destination = Path(copy_file.destination)
        if not source.is_file():
            raise FilePlacementError(f"Config file not found: {source}")

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, destination)
        except OSError as exc:
            raise FilePlacementError(f"Failed to place {source} at {destination}") from exc

        logger.debug("placed config file %s at %s", source, destination)
        placed.append(destination)

    return placed
