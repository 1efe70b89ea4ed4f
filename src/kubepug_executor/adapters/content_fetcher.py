"""Materialize the manifests under test on the local file system."""

from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional
from urllib.parse import quote, urlsplit, urlunsplit

import httpx

from ..models import ContentType, Repository, TestContent

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.yaml"


class ContentFetchError(RuntimeError):
    """Raised when manifest content cannot be made available locally."""


class ContentFetcher:
    """Return a local path for string, file, URI and git based test content."""

    def __init__(
        self,
        work_dir: str | Path | None = None,
        *,
        git_bin: str = "git",
        http_timeout: float = 30.0,
    ) -> None:
        self._work_dir = Path(work_dir) if work_dir else None
        self.git_bin = git_bin
        self.http_timeout = http_timeout

    @property
    def work_dir(self) -> Path:
        if self._work_dir is None:
            self._work_dir = Path(tempfile.mkdtemp(prefix="kubepug-"))
        self._work_dir.mkdir(parents=True, exist_ok=True)
        return self._work_dir

    def fetch(self, content: TestContent) -> Path:
        """Return the path of a file or directory holding the manifests."""

        if content.type is ContentType.STRING:
            return self._fetch_string(content.data)
        if content.type is ContentType.FILE:
            return self._fetch_local(content.path, expect_dir=False)
        if content.type is ContentType.DIR:
            return self._fetch_local(content.path, expect_dir=True)
        if content.type is ContentType.FILE_URI:
            return self._fetch_uri(content.uri)
        if content.type is ContentType.GIT_FILE:
            return self._fetch_git(content.repository, expect_dir=False)
        if content.type is ContentType.GIT_DIR:
            return self._fetch_git(content.repository, expect_dir=True)

        raise ContentFetchError(f"Unsupported content type: {content.type}")

    # Local content --------------------------------------------------------------
    def _fetch_string(self, data: str) -> Path:
        path = self.work_dir / MANIFEST_FILENAME
        try:
            path.write_text(data, encoding="utf-8")
        except OSError as exc:
            raise ContentFetchError(f"Could not write string content to {path}") from exc
        return path

    def _fetch_local(self, path: Optional[Path], *, expect_dir: bool) -> Path:
        if path is None:
            raise ContentFetchError("Content path is required for file and dir content")

        resolved = Path(path).resolve()
        if expect_dir and not resolved.is_dir():
            raise ContentFetchError(f"Content directory not found: {resolved}")
        if not expect_dir and not resolved.is_file():
            raise ContentFetchError(f"Content file not found: {resolved}")
        return resolved

    # Remote content -------------------------------------------------------------
    def _fetch_uri(self, uri: str) -> Path:
        if not uri:
            raise ContentFetchError("Content URI is required for file-uri content")

        try:
            with httpx.Client(timeout=self.http_timeout, follow_redirects=True) as client:
                response = client.get(uri)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ContentFetchError(
                f"Fetching {uri} returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ContentFetchError(f"Could not fetch {uri}: {exc}") from exc

        return self._fetch_string(response.text)

    def _fetch_git(self, repository: Optional[Repository], *, expect_dir: bool) -> Path:
        if repository is None or not repository.uri:
            raise ContentFetchError("Repository URI is required for git content")

        checkout = Path(tempfile.mkdtemp(prefix="repo-", dir=self.work_dir))
        clone_cmd: List[str] = [self.git_bin, "clone"]
        if not repository.commit:
            clone_cmd.extend(["--depth", "1"])
            if repository.branch:
                clone_cmd.extend(["--branch", repository.branch])
        clone_cmd.extend([self._authenticated_uri(repository), str(checkout)])

        self._run_git(clone_cmd, "clone", repository.uri)
        if repository.commit:
            self._run_git(
                [self.git_bin, "-C", str(checkout), "checkout", repository.commit],
                "checkout",
                repository.uri,
            )

        target = (checkout / repository.path).resolve() if repository.path else checkout
        if expect_dir and not target.is_dir():
            raise ContentFetchError(
                f"Directory {repository.path!r} not found in repository {repository.uri}"
            )
        if not expect_dir and not target.is_file():
            raise ContentFetchError(
                f"File {repository.path!r} not found in repository {repository.uri}"
            )
        return target

    def _authenticated_uri(self, repository: Repository) -> str:
        if not repository.token:
            return repository.uri

        parts = urlsplit(repository.uri)
        if parts.scheme not in {"http", "https"}:
            return repository.uri

        username = quote(repository.username or "git", safe="")
        credentials = f"{username}:{quote(repository.token, safe='')}"
        host = parts.netloc.rsplit("@", 1)[-1]
        return urlunsplit(parts._replace(netloc=f"{credentials}@{host}"))

    def _run_git(self, args: List[str], action: str, uri: str) -> None:
        try:
            subprocess.run(
                args,
                check=True,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as exc:
            raise ContentFetchError(f"Executable not found: {args[0]}") from exc
        except subprocess.CalledProcessError as exc:
            # the command line may embed a token, so the cause is not chained
            raise ContentFetchError(
                f"git {action} of {uri} failed with exit code {exc.returncode}"
            ) from None

        logger.debug("git %s finished for %s", action, uri)
