"""Conversion of raw ``kubepug --format=json`` output into :class:`ScanReport` models."""

from __future__ import annotations

import json
from typing import Any, Callable, List, Mapping, Tuple, TypeVar

from ..models import AffectedObject, DeletedFinding, DeprecatedFinding, ObjectScope, ScanReport

EXCERPT_LIMIT = 512

_KNOWN_SCOPES = frozenset(scope.value for scope in ObjectScope)

T = TypeVar("T")


class ReportParseError(ValueError):
    """Raised when kubepug output is not a valid JSON report."""

    def __init__(self, message: str, raw_text: str) -> None:
        self.raw_excerpt = _excerpt(raw_text)
        super().__init__(f"{message}: {self.raw_excerpt}")


def parse_scan_report(raw_text: str) -> ScanReport:
    """Parse the textual kubepug output into a :class:`ScanReport`.

    Absent, ``null`` and empty finding arrays are equivalent and produce empty
    tuples, and a bare ``null`` document is an empty report. Unknown keys and
    unknown ``Scope`` values are kept or ignored rather than rejected.
    """

    try:
        data = json.loads(raw_text)
    except (json.JSONDecodeError, TypeError) as exc:
        raise ReportParseError("could not unmarshal result", str(raw_text)) from exc

    if data is None:
        return ScanReport()
    if not isinstance(data, Mapping):
        raise ReportParseError("kubepug result must be a JSON object", raw_text)

    try:
        deprecated = _parse_list(data.get("DeprecatedAPIs"), "DeprecatedAPIs", _deprecated_finding)
        deleted = _parse_list(data.get("DeletedAPIs"), "DeletedAPIs", _deleted_finding)
    except (TypeError, ValueError) as exc:
        raise ReportParseError(f"invalid kubepug result ({exc})", raw_text) from exc

    return ScanReport(deprecated_apis=deprecated, deleted_apis=deleted)


# ----------------------------------------------------------------------
def _parse_list(
    value: Any, key: str, build: Callable[[Mapping[str, Any]], T]
) -> Tuple[T, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise TypeError(f"{key} must be a list or null")

    parsed: List[T] = []
    for index, entry in enumerate(value):
        if not isinstance(entry, Mapping):
            raise TypeError(f"{key}[{index}] must be an object")
        parsed.append(build(entry))
    return tuple(parsed)


def _deprecated_finding(entry: Mapping[str, Any]) -> DeprecatedFinding:
    return DeprecatedFinding(
        description=_string(entry, "Description"),
        group=_string(entry, "Group"),
        kind=_string(entry, "Kind"),
        version=_string(entry, "Version"),
        name=_string(entry, "Name"),
        deprecated=_flag(entry, "Deprecated"),
        items=_parse_list(entry.get("Items"), "Items", _affected_object),
    )


def _deleted_finding(entry: Mapping[str, Any]) -> DeletedFinding:
    return DeletedFinding(
        description=_string(entry, "Description"),
        group=_string(entry, "Group"),
        kind=_string(entry, "Kind"),
        version=_string(entry, "Version"),
        name=_string(entry, "Name"),
        deleted=_flag(entry, "Deleted"),
        items=_parse_list(entry.get("Items"), "Items", _affected_object),
    )


def _affected_object(entry: Mapping[str, Any]) -> AffectedObject:
    scope = _string(entry, "Scope")
    # scopes kubepug may add later are kept verbatim
    return AffectedObject(
        scope=ObjectScope(scope) if scope in _KNOWN_SCOPES else scope,
        object_name=_string(entry, "ObjectName"),
        namespace=_string(entry, "Namespace"),
    )


def _string(entry: Mapping[str, Any], key: str) -> str:
    value = entry.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string")
    return value


def _flag(entry: Mapping[str, Any], key: str) -> bool:
    value = entry.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise TypeError(f"{key} must be a boolean")
    return value


def _excerpt(raw_text: str) -> str:
    if len(raw_text) <= EXCERPT_LIMIT:
        return raw_text
    return raw_text[:EXCERPT_LIMIT] + "..."
