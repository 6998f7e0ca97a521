"""Output renderers for command results.

The module exports the OutputWriter base for new output formats, and a
factory function to instantiate the writer selected by configuration.
"""

from __future__ import annotations

from MetaCPANClient.config import AppConfig
from MetaCPANClient.renderers.base import OutputWriter
from MetaCPANClient.renderers.console import ConsoleOutputWriter, render_text
from MetaCPANClient.renderers.json import JsonOutputWriter, render_json


def create_output_writer(config: AppConfig) -> OutputWriter:
    """Create output writer based on config.

    Args:
        config: Application configuration.

    Returns:
        OutputWriter instance for the configured format.
    """
    if config.output.format == "console":
        return ConsoleOutputWriter()
    if config.output.format == "json":
        return JsonOutputWriter()
    raise ValueError(f"Unsupported output format: {config.output.format}")


__all__ = [
    "OutputWriter",
    "ConsoleOutputWriter",
    "JsonOutputWriter",
    "render_json",
    "render_text",
    "create_output_writer",
]
