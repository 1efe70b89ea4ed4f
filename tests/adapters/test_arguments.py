from pathlib import Path

import pytest

from kubepug_executor.adapters import ArgumentConflictError, build_args


def test_reserved_arguments_appended_in_order():
    args = ["--k8s-version=v1.22.0", "--error-on-deleted"]

    result = build_args(args, Path("/tmp/manifest.yaml"))

    assert result == [
        "--k8s-version=v1.22.0",
        "--error-on-deleted",
        "--format=json",
        "--input-file",
        "/tmp/manifest.yaml",
    ]
    assert args == ["--k8s-version=v1.22.0", "--error-on-deleted"]


def test_empty_arguments_accepted():
    assert build_args([], "manifests") == ["--format=json", "--input-file", "manifests"]


@pytest.mark.parametrize(
    ("argument", "flag"),
    [
        ("--format=xml", "--format"),
        ("--input-file=other.yaml", "--input-file"),
        ("--input-file", "--input-file"),
    ],
)
def test_reserved_flags_rejected(argument, flag):
    with pytest.raises(ArgumentConflictError) as excinfo:
        build_args(["--k8s-version=v1.22.0", argument], "manifest.yaml")

    assert excinfo.value.flag == flag
    assert excinfo.value.argument == argument
    assert argument in str(excinfo.value)
