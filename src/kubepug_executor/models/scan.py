"""Models describing the JSON report emitted by ``kubepug --format=json``."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class ObjectScope(str, Enum):
    """Whether an affected object is cluster scoped or namespaced."""

    GLOBAL = "GLOBAL"
    OBJECT = "OBJECT"


@dataclass(frozen=True, slots=True)
class AffectedObject:
    """A concrete cluster object that still uses a flagged API."""

    scope: ObjectScope | str
    object_name: str
    namespace: str = ""

    def __str__(self) -> str:
        label = self.scope.value if isinstance(self.scope, ObjectScope) else self.scope
        if self.namespace:
            return f"{self.namespace}/{self.object_name} ({label})"
        return f"{self.object_name} ({label})"


@dataclass(frozen=True, slots=True)
class DeprecatedFinding:
    """An API that is deprecated but still served by the API server."""

    description: str = ""
    group: str = ""
    kind: str = ""
    version: str = ""
    name: str = ""
    deprecated: bool = False
    items: Tuple[AffectedObject, ...] = ()

    def __str__(self) -> str:
        return _describe(self, "Deprecated", self.deprecated)


@dataclass(frozen=True, slots=True)
class DeletedFinding:
    """An API that has been removed from the API server."""

    description: str = ""
    group: str = ""
    kind: str = ""
    version: str = ""
    name: str = ""
    deleted: bool = False
    items: Tuple[AffectedObject, ...] = ()

    def __str__(self) -> str:
        return _describe(self, "Deleted", self.deleted)


@dataclass(frozen=True, slots=True)
class ScanReport:
    """Root structure of a kubepug report."""

    deprecated_apis: Tuple[DeprecatedFinding, ...] = ()
    deleted_apis: Tuple[DeletedFinding, ...] = ()

    @property
    def has_findings(self) -> bool:
        return bool(self.deprecated_apis or self.deleted_apis)

    @property
    def finding_count(self) -> int:
        return len(self.deprecated_apis) + len(self.deleted_apis)


def _describe(finding: DeprecatedFinding | DeletedFinding, flag_name: str, flag: bool) -> str:
    lines = [
        f"Kind: {finding.kind}",
        f"Group: {finding.group}",
        f"Version: {finding.version}",
        f"Name: {finding.name}",
        f"{flag_name}: {str(flag).lower()}",
    ]
    if finding.description:
        lines.append(f"Description: {finding.description}")
    lines.append(f"Items ({len(finding.items)}):")
    lines.extend(f"  - {item}" for item in finding.items)
    return "\n ".join(lines)
