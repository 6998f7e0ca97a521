"""MetaCPANClient: typed client for the MetaCPAN search API."""

from __future__ import annotations

__version__ = "0.1.0"

from MetaCPANClient.client import MetaCPANClient
from MetaCPANClient.config.api import ApiConfig
from MetaCPANClient.core.errors import (
    DecodeError,
    EntityNotImplemented,
    InvalidSpecShape,
    MetaCPANError,
    NotFoundError,
    TransportError,
    UnknownEntityKind,
)
from MetaCPANClient.services.resultset import ResultSet

__all__ = [
    "ApiConfig",
    "DecodeError",
    "EntityNotImplemented",
    "InvalidSpecShape",
    "MetaCPANClient",
    "MetaCPANError",
    "NotFoundError",
    "ResultSet",
    "TransportError",
    "UnknownEntityKind",
    "__version__",
]
