"""Command-line interface for glidequery-gate."""

from glidequery_gate.cli.main import app, main

__all__ = ["app", "main"]
