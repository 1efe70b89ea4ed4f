"""Integration tests for the ``kubepug-executor run`` command."""

from __future__ import annotations

import io
import json
import logging
from contextlib import redirect_stdout
from pathlib import Path

import pytest

from kubepug_executor.adapters import ContentFetchError, ProcessExecutionError
from kubepug_executor.cli import app
from kubepug_executor.models import ExecutionReport, ExecutionRequest
from kubepug_executor.parsing import parse_scan_report
from kubepug_executor.runner import KubepugRunner
from kubepug_executor.verdict import build_execution_report

FIXTURES = Path(__file__).resolve().parents[1] / "fixtures"


class StubRunner:
    """Runner replacement that answers with a fixture report."""

    def __init__(self, fixture: str | None = None, error: Exception | None = None) -> None:
        self.fixture = fixture
        self.error = error
        self.requests: list[ExecutionRequest] = []

    def run(self, execution: ExecutionRequest) -> ExecutionReport:
        self.requests.append(execution)
        if self.error:
            raise self.error
        raw = (FIXTURES / self.fixture).read_text(encoding="utf-8")
        return build_execution_report(parse_scan_report(raw), raw)


@pytest.fixture
def install_runner(monkeypatch: pytest.MonkeyPatch):
    def install(runner: StubRunner) -> StubRunner:
        monkeypatch.setattr(app, "create_runner", lambda **_: runner)
        return runner

    return install


def invoke_cli(args: list[str]) -> tuple[int, str]:
    """Execute the CLI with the provided arguments and capture stdout."""

    stdout = io.StringIO()
    with redirect_stdout(stdout):
        exit_code = app.main(args)
    return exit_code, stdout.getvalue()


def test_clean_manifests_pass(install_runner) -> None:
    runner = install_runner(StubRunner("kubepug-empty.json"))

    exit_code, output = invoke_cli(["run", "--content-string", "kind: ConfigMap"])

    assert exit_code == 0, output
    assert "Execution passed." in output
    assert runner.requests[0].content.data == "kind: ConfigMap"


def test_deprecated_api_fails_with_table(install_runner) -> None:
    install_runner(StubRunner("kubepug-deprecated.json"))

    exit_code, output = invoke_cli(["run", "--content-string", "kind: ComponentStatus"])

    assert exit_code == 1
    assert "Deprecated APIs" in output
    assert "Kind: ComponentStatus" in output
    assert "Execution failed." in output


def test_json_output(install_runner) -> None:
    install_runner(StubRunner("kubepug-mixed.json"))

    exit_code, output = invoke_cli(["run", "--content-string", "x", "--format", "json"])

    assert exit_code == 1
    payload = json.loads(output)
    assert payload["status"] == "failed"
    assert [step["name"] for step in payload["steps"]] == ["Deprecated APIs", "Deleted APIs"]
    assert [len(step["assertionResults"]) for step in payload["steps"]] == [1, 2]


def test_definition_file_and_overrides(install_runner, tmp_path: Path) -> None:
    runner = install_runner(StubRunner("kubepug-empty.json"))
    definition = tmp_path / "execution.yaml"
    definition.write_text(
        "content:\n  type: string\n  data: 'kind: Pod'\nargs: ['--k8s-version=v1.22.0']\n",
        encoding="utf-8",
    )

    exit_code, _ = invoke_cli(
        [
            "run",
            str(definition),
            "--arg=--error-on-deleted",
            "--variable",
            "REGION=eu",
            "--secret",
            "TOKEN=s3cr3t",
        ]
    )

    assert exit_code == 0
    request = runner.requests[0]
    assert request.content.data == "kind: Pod"
    assert request.args == ("--k8s-version=v1.22.0", "--error-on-deleted")
    assert {variable.name: variable.is_secret for variable in request.variables} == {
        "REGION": False,
        "TOKEN": True,
    }


def test_errors_exit_with_code_two(install_runner) -> None:
    install_runner(StubRunner(error=ContentFetchError("Content file not found: /nope")))

    exit_code, output = invoke_cli(["run", "--content-file", "/nope"])

    assert exit_code == 2
    assert output.startswith("Error: Content file not found")


def test_missing_content_is_an_error() -> None:
    exit_code, output = invoke_cli(["run"])

    assert exit_code == 2
    assert "--content-*" in output


def test_malformed_variable_is_an_error() -> None:
    exit_code, output = invoke_cli(["run", "--content-string", "x", "--variable", "NOVALUE"])

    assert exit_code == 2
    assert "KEY=VALUE" in output


def test_debug_logs_never_contain_secrets(monkeypatch, caplog, capsys) -> None:
    class FailingExecutor:
        def run(self, executable, args, *, env=None, cwd=None):
            raise ProcessExecutionError(
                f"{executable} failed with exit code 3: auth failed for {env['TOKEN']}",
                returncode=3,
                stderr=f"auth failed for {env['TOKEN']}",
            )

    class LocalFetcher:
        def fetch(self, content):
            return Path("/work/manifest.yaml")

    monkeypatch.setattr(
        app,
        "create_runner",
        lambda **kwargs: KubepugRunner(
            fetcher=LocalFetcher(),
            executor=FailingExecutor(),
            file_placer=lambda copy_files: [],
            **kwargs,
        ),
    )
    caplog.set_level(logging.DEBUG)

    exit_code, output = invoke_cli(
        [
            "--log-level",
            "DEBUG",
            "run",
            "--content-string",
            "x",
            "--secret",
            "TOKEN=s3cr3tvalue",
            "--kubepug-bin",
            "fakepug",
        ]
    )

    assert exit_code == 2
    assert "auth failed for ********" in output
    assert "kubepug run failed" in caplog.text
    assert "ProcessExecutionError" in caplog.text
    assert "s3cr3tvalue" not in caplog.text
    assert "s3cr3tvalue" not in output
    assert "s3cr3tvalue" not in capsys.readouterr().err
