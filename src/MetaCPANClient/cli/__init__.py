"""CLI package for MetaCPANClient.

A thin front end over `MetaCPANClient`: click parameter handling, command
objects, and a runner managing logging and the client lifecycle.
"""

from __future__ import annotations

__all__ = ["CommandRunner", "cli", "main"]

from MetaCPANClient.cli.runner import CommandRunner
from MetaCPANClient.cli.ui import cli


def main() -> None:
    """Run the MetaCPANClient CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
