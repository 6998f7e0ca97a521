"""Output domain configuration for the command line renderers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from MetaCPANClient.config.common import (
    expect_int,
    expect_str,
    get_optional_value,
    get_section,
)

_ALLOWED_FORMATS = {"console", "json"}


@dataclass(frozen=True, slots=True)
class OutputConfig:
    """Output configuration.

    Attributes:
        format: Renderer used by the CLI (``console`` or ``json``).
        max_results: Cap on records printed by ``search``; -1 means no cap.
    """

    format: str = "console"
    max_results: int = 20


def load_output(raw: Mapping[str, Any]) -> OutputConfig:
    """Load output domain config from raw mapping.

    Raises:
        TypeError: If config types are invalid.
    """
    section = get_section(raw, "output", required=False)
    return OutputConfig(
        format=expect_str(get_optional_value(section, "format", "console"), "output.format").lower(),
        max_results=expect_int(get_optional_value(section, "max_results", 20), "output.max_results"),
    )


def check_output(config: OutputConfig) -> None:
    """Validate output domain constraints.

    Raises:
        ValueError: If values violate output constraints.
    """
    if config.format not in _ALLOWED_FORMATS:
        raise ValueError(f"output.format must be one of {sorted(_ALLOWED_FORMATS)}")
    if config.max_results == 0 or config.max_results < -1:
        raise ValueError("output.max_results must be -1 or positive")
