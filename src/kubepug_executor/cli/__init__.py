"""Command-line interface package for the kubepug executor."""

from .app import build_parser, build_request, create_runner, main, render_table, run

__all__ = [
    "build_parser",
    "build_request",
    "create_runner",
    "main",
    "render_table",
    "run",
]
