"""Command runner for coordinating CLI execution.

Manages logging configuration, client lifecycle, output flushing and error
handling for command execution.
"""

from __future__ import annotations

import click

from MetaCPANClient.api.transport import Transport
from MetaCPANClient.cli.commands import Command
from MetaCPANClient.client import MetaCPANClient
from MetaCPANClient.config import AppConfig
from MetaCPANClient.renderers import create_output_writer
from MetaCPANClient.utils.log import configure_logging, log


class CommandRunner:
    """Orchestrates command execution with proper resource management."""

    def __init__(self, config: AppConfig, *, transport: Transport | None = None) -> None:
        """Initialize command runner.

        Args:
            config: Application configuration.
            transport: Optional transport override, passed to the client.
        """
        self.config = config
        self.transport = transport

    def run(self, action: str, command: Command) -> None:
        """Execute a command against a fresh client.

        Args:
            action: The CLI command name (e.g., 'search').
            command: Command to execute.

        Raises:
            click.Abort: When the command fails.
        """
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )
        log.debug("Running %s against %s", action, self.config.api.base_url)
        try:
            writer = create_output_writer(self.config)
            with MetaCPANClient(self.config.api, transport=self.transport) as client:
                command.execute(client, writer)
            writer.finalize(action)
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("%s failed: %s", action.capitalize(), e)
            raise click.Abort from e
