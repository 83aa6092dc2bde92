"""CLI package for FhirTokenQuery command orchestration.

This package contains the click interface, the command runner and the
command implementations.
"""

from __future__ import annotations

__all__ = ["CommandRunner", "cli", "main"]

from FhirTokenQuery.cli.runner import CommandRunner
from FhirTokenQuery.cli.ui import cli


def main() -> None:
    """Run FhirTokenQuery CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
