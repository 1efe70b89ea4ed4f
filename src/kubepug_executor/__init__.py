"""Run kubepug and translate its findings into pass/fail execution reports."""

__version__ = "0.1.0"
