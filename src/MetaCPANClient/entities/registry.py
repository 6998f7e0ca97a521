"""Entity type registry.

Maps each entity kind to its identifying field, its endpoint on the API, and
the record class its documents decode into.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from MetaCPANClient.core.errors import EntityNotImplemented, UnknownEntityKind
from MetaCPANClient.core.models import (
    Author,
    Distribution,
    EntityRecord,
    Favorite,
    File,
    Module,
    Rating,
    Release,
)

# Known to the API but not supported by this client.
_UNIMPLEMENTED_KINDS = frozenset({"pod"})


@dataclass(frozen=True, slots=True)
class EntityDescriptor:
    """Static description of one entity kind.

    Attributes:
        kind: Kind token (e.g. ``author``).
        id_field: Document field holding the record identifier.
        endpoint: API path of the kind, relative to the base URL.
        record_type: Record class documents are decoded into.
    """

    kind: str
    id_field: str
    endpoint: str
    record_type: type[EntityRecord]

    @property
    def search_path(self) -> str:
        return f"{self.endpoint}/_search"


_DESCRIPTORS: Mapping[str, EntityDescriptor] = MappingProxyType(
    {
        descriptor.kind: descriptor
        for descriptor in (
            EntityDescriptor("author", "pauseid", "author", Author),
            EntityDescriptor("module", "documentation", "module", Module),
            EntityDescriptor("distribution", "name", "distribution", Distribution),
            EntityDescriptor("release", "name", "release", Release),
            EntityDescriptor("file", "id", "file", File),
            EntityDescriptor("favorite", "id", "favorite", Favorite),
            EntityDescriptor("rating", "id", "rating", Rating),
        )
    }
)


def describe(kind: str) -> EntityDescriptor:
    """Return the descriptor registered for an entity kind.

    Args:
        kind: Kind token, case-insensitive.

    Returns:
        EntityDescriptor: Static description of the kind.

    Raises:
        EntityNotImplemented: If the kind is known but not implemented (``pod``).
        UnknownEntityKind: If the kind is not registered.
    """
    token = kind.strip().lower() if isinstance(kind, str) else kind
    if token in _UNIMPLEMENTED_KINDS:
        raise EntityNotImplemented(token)
    descriptor = _DESCRIPTORS.get(token) if isinstance(token, str) else None
    if descriptor is None:
        raise UnknownEntityKind(str(kind))
    return descriptor


def supported_kinds() -> tuple[str, ...]:
    """Return all entity kinds in registry order."""
    return tuple(_DESCRIPTORS.keys())
