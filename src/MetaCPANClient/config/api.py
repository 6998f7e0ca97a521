"""API domain configuration (endpoint, identity, paging)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from MetaCPANClient import __version__
from MetaCPANClient.api.transport import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from MetaCPANClient.config.common import (
    expect_float,
    expect_int,
    expect_str,
    get_optional_value,
    get_section,
)
from MetaCPANClient.services.resultset import DEFAULT_PAGE_SIZE

DEFAULT_USER_AGENT = f"MetaCPANClient/{__version__}"
DEFAULT_BASE_URL_ENV = "METACPAN_BASE_URL"


@dataclass(frozen=True, slots=True)
class ApiConfig:
    """Connection settings for one client instance.

    Immutable: a client built from an `ApiConfig` keeps talking to the same
    base URL with the same identity for its whole lifetime.
    """

    base_url: str = DEFAULT_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = DEFAULT_TIMEOUT
    page_size: int = DEFAULT_PAGE_SIZE
    base_url_env: str = DEFAULT_BASE_URL_ENV


def load_api(raw: Mapping[str, Any]) -> ApiConfig:
    """Load api configuration from raw mapping.

    Every key is optional. When the environment variable named by
    ``api.base_url_env`` is set, it overrides ``api.base_url``.

    Args:
        raw: Root configuration mapping.

    Returns:
        Parsed api configuration.

    Raises:
        TypeError: If config types are invalid.
    """
    section = get_section(raw, "api", required=False)
    base_url_env = expect_str(
        get_optional_value(section, "base_url_env", DEFAULT_BASE_URL_ENV),
        "api.base_url_env",
    )
    base_url = expect_str(get_optional_value(section, "base_url", DEFAULT_BASE_URL), "api.base_url")
    env_base_url = os.environ.get(base_url_env, "").strip() if base_url_env else ""
    return ApiConfig(
        base_url=(env_base_url or base_url).rstrip("/"),
        user_agent=expect_str(get_optional_value(section, "user_agent", DEFAULT_USER_AGENT), "api.user_agent"),
        timeout=expect_float(get_optional_value(section, "timeout", DEFAULT_TIMEOUT), "api.timeout"),
        page_size=expect_int(get_optional_value(section, "page_size", DEFAULT_PAGE_SIZE), "api.page_size"),
        base_url_env=base_url_env,
    )


def check_api(config: ApiConfig) -> None:
    """Validate api domain constraints.

    Raises:
        ValueError: If values violate api constraints.
    """
    if not config.base_url.startswith(("http://", "https://")):
        raise ValueError("api.base_url must be an http(s) URL")
    if not config.user_agent.strip():
        raise ValueError("api.user_agent must not be empty")
    if config.timeout <= 0:
        raise ValueError("api.timeout must be positive")
    if config.page_size <= 0:
        raise ValueError("api.page_size must be positive")
