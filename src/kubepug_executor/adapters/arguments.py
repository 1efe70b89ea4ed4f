"""Validation of caller supplied kubepug arguments."""

from __future__ import annotations

import os
from typing import List, Sequence

RESERVED_FLAGS = ("--format", "--input-file")


class ArgumentConflictError(ValueError):
    """Raised when a caller argument collides with one the executor injects."""

    def __init__(self, flag: str, argument: str) -> None:
        self.flag = flag
        self.argument = argument
        super().__init__(
            f'the kubepug executor does not accept the "{flag}" parameter: {argument}'
        )


def build_args(args: Sequence[str], input_path: str | os.PathLike[str]) -> List[str]:
    """Return ``args`` followed by the JSON format and input file selectors."""

    for argument in args:
        for flag in RESERVED_FLAGS:
            if flag in argument:
                raise ArgumentConflictError(flag, argument)

    return [*args, "--format=json", "--input-file", os.fspath(input_path)]
