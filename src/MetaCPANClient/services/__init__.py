"""Lookup services for MetaCPANClient.

Dispatching of id/spec lookups, lazily paginated result sets, and the
reverse-dependency resolver built on top of them.
"""

from __future__ import annotations

from MetaCPANClient.services.dispatch import Dispatcher
from MetaCPANClient.services.resultset import DEFAULT_PAGE_SIZE, ResultSet, ResultSetState
from MetaCPANClient.services.reverse_deps import reverse_dependencies

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "Dispatcher",
    "ResultSet",
    "ResultSetState",
    "reverse_dependencies",
]
