from __future__ import annotations

"""Public configuration API for MetaCPANClient."""

from MetaCPANClient.config.api import ApiConfig
from MetaCPANClient.config.app import (
    AppConfig,
    load_config,
    load_config_with_defaults,
    parse_config_dict,
)
from MetaCPANClient.config.output import OutputConfig
from MetaCPANClient.config.runtime import RuntimeConfig

__all__ = [
    "ApiConfig",
    "AppConfig",
    "OutputConfig",
    "RuntimeConfig",
    "load_config",
    "load_config_with_defaults",
    "parse_config_dict",
]
