"""Lookup dispatcher.

Decides, from the shape of the lookup argument, whether a call is a direct
fetch by id (one record, one request) or a search (a lazy `ResultSet`, no
request until it is advanced).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union
from urllib.parse import quote

from MetaCPANClient.api.request import ApiRequest
from MetaCPANClient.core.models import EntityRecord
from MetaCPANClient.core.query import SearchSpec, is_search_spec
from MetaCPANClient.entities.parser import parse_entity
from MetaCPANClient.entities.registry import EntityDescriptor, describe
from MetaCPANClient.search.compiler import compile_search_spec
from MetaCPANClient.services.resultset import DEFAULT_PAGE_SIZE, ResultSet
from MetaCPANClient.utils.log import log

LookupArg = Union[str, int, SearchSpec, Mapping[str, Any]]

# Characters kept verbatim in id path segments (module names, release paths).
_ID_SAFE_CHARS = ":/"


@dataclass(slots=True)
class Dispatcher:
    """Routes lookups to a direct fetch or a search."""

    request: ApiRequest
    page_size: int = DEFAULT_PAGE_SIZE

    def lookup(self, kind: str, arg: LookupArg) -> EntityRecord | ResultSet:
        """Look up records of one kind.

        Args:
            kind: Entity kind token.
            arg: Scalar id for a direct fetch, or a search spec.

        Returns:
            One record for a scalar id; a `ResultSet` for a search spec.

        Raises:
            UnknownEntityKind: If the kind is not registered.
            EntityNotImplemented: If the kind is ``pod``.
            InvalidSpecShape: If the spec is malformed.
            TypeError: If arg is neither a scalar id nor a spec.
        """
        descriptor = describe(kind)
        if is_search_spec(arg):
            return self.search(descriptor, arg)
        if isinstance(arg, bool) or not isinstance(arg, (str, int)):
            raise TypeError(f"lookup argument must be an id or a search spec, got {type(arg).__name__}")
        return self.fetch_one(descriptor, str(arg))

    def fetch_one(self, descriptor: EntityDescriptor, record_id: str) -> EntityRecord:
        """Fetch a single record by id.

        Raises:
            NotFoundError: If the backend has no such record.
            TransportError: On network or backend failure.
            DecodeError: If the body is malformed.
        """
        record_id = record_id.strip()
        if not record_id:
            raise ValueError(f"{descriptor.kind} id must not be empty")
        path = f"{descriptor.endpoint}/{quote(record_id, safe=_ID_SAFE_CHARS)}"
        log.debug("Fetch %s id=%s", descriptor.kind, record_id)
        payload = self.request.fetch(path)
        return parse_entity(descriptor, payload, requested_id=record_id)

    def search(
        self,
        descriptor: EntityDescriptor,
        spec: SearchSpec | Mapping[str, Any],
        *,
        page_size: int | None = None,
    ) -> ResultSet:
        """Compile a spec and wrap it in an unfetched result set."""
        query = compile_search_spec(spec)
        log.debug("Search %s query=%s", descriptor.kind, query)
        return ResultSet(
            request=self.request,
            descriptor=descriptor,
            query=query,
            page_size=self.page_size if page_size is None else page_size,
        )
