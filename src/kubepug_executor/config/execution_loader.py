"""Utilities for loading and merging execution definition files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, MutableMapping, Sequence

import yaml

from ..models import (
    ContentType,
    CopyFile,
    ExecutionRequest,
    Repository,
    TestContent,
    Variable,
    VariableType,
)


class ExecutionConfigError(RuntimeError):
    """Raised when execution definition files cannot be loaded or parsed."""


class ExecutionLoader:
    """Build an :class:`ExecutionRequest` from one or more YAML/JSON definition files.

    Later files override ``content``, extend ``args`` and ``copyFiles`` and
    merge ``variables`` by name. Relative paths are resolved against the
    directory of the file that declares them.
    """

    def load(
        self,
        paths: Sequence[Path | str],
        *,
        fallback_content: TestContent | None = None,
    ) -> ExecutionRequest:
        if not paths:
            raise ExecutionConfigError("At least one execution definition file is required")

        content = fallback_content
        args: List[str] = []
        variables: MutableMapping[str, Variable] = {}
        copy_files: List[CopyFile] = []

        for path in (Path(item) for item in paths):
            data = self._load_definition(path)
            base_dir = path.resolve().parent

            if data.get("content") is not None:
                content = self._parse_content(data["content"], base_dir, path)

            raw_args = data.get("args") or []
            if not isinstance(raw_args, list):
                raise ExecutionConfigError(f"'args' must be a list in {path}")
            args.extend(str(arg) for arg in raw_args)

            for variable in self._parse_variables(data.get("variables"), path):
                variables[variable.name] = variable

            copy_files.extend(self._parse_copy_files(data.get("copyFiles"), base_dir, path))

        if content is None:
            raise ExecutionConfigError("No content declared in execution definitions")

        return ExecutionRequest(
            content=content,
            args=tuple(args),
            variables=tuple(variables.values()),
            copy_files=tuple(copy_files),
        )

    # ------------------------------------------------------------------
    def _parse_content(self, raw: Any, base_dir: Path, source: Path) -> TestContent:
        if not isinstance(raw, Mapping):
            raise ExecutionConfigError(f"'content' must be a mapping in {source}")

        try:
            content_type = ContentType(str(raw.get("type", ContentType.STRING.value)).strip())
        except ValueError as exc:
            raise ExecutionConfigError(
                f"Unsupported content type {raw.get('type')!r} in {source}"
            ) from exc

        path = None
        if raw.get("path"):
            path = _resolve(base_dir, raw["path"])

        repository = None
        repo_config = raw.get("repository")
        if isinstance(repo_config, Mapping):
            if not repo_config.get("uri"):
                raise ExecutionConfigError(f"'repository.uri' is required in {source}")
            repository = Repository(
                uri=str(repo_config["uri"]),
                branch=str(repo_config.get("branch") or ""),
                commit=str(repo_config.get("commit") or ""),
                path=str(repo_config.get("path") or ""),
                username=str(repo_config.get("username") or ""),
                token=str(repo_config.get("token") or ""),
            )

        return TestContent(
            type=content_type,
            data=str(raw.get("data") or ""),
            uri=str(raw.get("uri") or ""),
            path=path,
            repository=repository,
        )

    def _parse_variables(self, raw: Any, source: Path) -> List[Variable]:
        if not raw:
            return []
        if not isinstance(raw, Mapping):
            raise ExecutionConfigError(f"'variables' must be a mapping in {source}")

        parsed: List[Variable] = []
        for name, value in raw.items():
            if isinstance(value, Mapping):
                try:
                    variable_type = VariableType(str(value.get("type", "basic")).strip().lower())
                except ValueError as exc:
                    raise ExecutionConfigError(
                        f"Unsupported variable type for {name!r} in {source}"
                    ) from exc
                raw_value = value.get("value")
            else:
                variable_type = VariableType.BASIC
                raw_value = value

            parsed.append(
                Variable(
                    name=str(name),
                    value="" if raw_value is None else str(raw_value),
                    type=variable_type,
                )
            )
        return parsed

    def _parse_copy_files(self, raw: Any, base_dir: Path, source: Path) -> List[CopyFile]:
        if not raw:
            return []
        if not isinstance(raw, list):
            raise ExecutionConfigError(f"'copyFiles' must be a list in {source}")

        parsed: List[CopyFile] = []
        for entry in raw:
            if not isinstance(entry, Mapping) or not entry.get("source") or not entry.get(
                "destination"
            ):
                raise ExecutionConfigError(
                    f"Each copyFiles entry needs 'source' and 'destination' in {source}"
                )
            parsed.append(
                CopyFile(
                    source=_resolve(base_dir, entry["source"]),
                    destination=_resolve(base_dir, entry["destination"]),
                )
            )
        return parsed

    # ------------------------------------------------------------------
    def _load_definition(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise ExecutionConfigError(f"Execution definition not found: {path}")

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:  # pragma: no cover - filesystem errors surfaced to caller
            raise ExecutionConfigError(f"Failed to read execution definition {path}") from exc

        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as exc:
            raise ExecutionConfigError(f"Invalid YAML in execution definition {path}") from exc

        if not isinstance(data, Mapping):
            raise ExecutionConfigError(f"Execution definition must be a mapping: {path}")

        return dict(data)


def _resolve(base_dir: Path, value: Any) -> Path:
    candidate = Path(str(value)).expanduser()
    return candidate if candidate.is_absolute() else (base_dir / candidate).resolve()
