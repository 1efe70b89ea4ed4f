"""Environment overlay construction and secret redaction for kubepug runs."""

from __future__ import annotations

import os
from typing import Dict, List, Mapping, Optional, Sequence

from ..models import Variable

OBFUSCATED = "********"


class EnvManager:
    """Expose execution variables to the kubepug process without touching ``os.environ``."""

    def __init__(
        self,
        variables: Sequence[Variable] = (),
        *,
        inherit_environment: bool = True,
        base_environment: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.variables = list(variables)
        self.inherit_environment = inherit_environment
        self.base_environment = base_environment

    def environment(self) -> Dict[str, str]:
        """Return the full environment mapping for the child process."""

        if self.base_environment is not None:
            env = dict(self.base_environment)
        elif self.inherit_environment:
            env = os.environ.copy()
        else:
            env = {"PATH": os.environ.get("PATH", "")}

        for variable in self.variables:
            env[variable.name] = variable.value
        return env

    @property
    def secret_values(self) -> List[str]:
        return [
            variable.value
            for variable in self.variables
            if variable.is_secret and variable.value
        ]

    def obfuscate(self, text: str) -> str:
        """Replace every secret value occurring in ``text``."""

        # longest first so a secret containing another one is fully hidden
        for value in sorted(set(self.secret_values), key=len, reverse=True):
            text = text.replace(value, OBFUSCATED)
        return text
