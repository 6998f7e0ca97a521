"""Decoding of API payloads into entity records."""

from __future__ import annotations

from typing import Any, Mapping

from MetaCPANClient.core.errors import DecodeError
from MetaCPANClient.core.models import EntityRecord
from MetaCPANClient.entities.registry import EntityDescriptor

# Module documents without POD have no `documentation` value.
_MODULE_KIND = "module"


def parse_entity(
    descriptor: EntityDescriptor,
    payload: Any,
    *,
    requested_id: str | None = None,
) -> EntityRecord:
    """Decode a direct-fetch body into one record.

    A module document without POD falls back to its first package name,
    then to `requested_id`.

    Args:
        descriptor: Kind the payload belongs to.
        payload: Decoded JSON body.
        requested_id: Id the record was fetched by, if any.

    Returns:
        Record of the descriptor's record type.

    Raises:
        DecodeError: If the body is not an object or no id can be found.
    """
    if not isinstance(payload, Mapping):
        raise DecodeError(f"{descriptor.kind} response must be an object, got {type(payload).__name__}")
    record_id = _document_id(descriptor, payload)
    if record_id is None and descriptor.kind == _MODULE_KIND and requested_id is not None:
        record_id = _id_value(requested_id)
    if record_id is None:
        raise DecodeError(f"{descriptor.kind} response is missing required field '{descriptor.id_field}'")
    return descriptor.record_type(id=record_id, data=payload)


def parse_search_page(descriptor: EntityDescriptor, payload: Any) -> tuple[int, list[EntityRecord]]:
    """Decode one page of search hits.

    Any malformed hit fails the whole page; no partial result is returned.

    Args:
        descriptor: Kind the hits belong to.
        payload: Decoded ``_search`` response body.

    Returns:
        Total hit count and the page's records in backend order.

    Raises:
        DecodeError: If the page or any hit is malformed.
    """
    if not isinstance(payload, Mapping):
        raise DecodeError(f"search response must be an object, got {type(payload).__name__}")
    hits = payload.get("hits")
    if not isinstance(hits, Mapping):
        raise DecodeError("search response is missing 'hits'")

    total = _parse_total(hits.get("total"))
    items = hits.get("hits", [])
    if not isinstance(items, list):
        raise DecodeError("search response 'hits.hits' must be a list")

    records: list[EntityRecord] = []
    for idx, hit in enumerate(items):
        if not isinstance(hit, Mapping):
            raise DecodeError(f"search hit #{idx} must be an object")
        source = hit.get("_source")
        if not isinstance(source, Mapping):
            raise DecodeError(f"search hit #{idx} is missing '_source'")
        record_id = _document_id(descriptor, source)
        if record_id is None:
            record_id = _id_value(hit.get("_id"))
        if record_id is None:
            raise DecodeError(
                f"search hit #{idx} has neither '{descriptor.id_field}' nor '_id'"
            )
        records.append(descriptor.record_type(id=record_id, data=source))
    return total, records


def _parse_total(raw: Any) -> int:
    """Accept both the legacy integer and the ``{"value": n}`` total shape."""
    if isinstance(raw, Mapping):
        raw = raw.get("value")
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise DecodeError(f"search response has invalid 'hits.total': {raw!r}")
    return raw


def _document_id(descriptor: EntityDescriptor, doc: Mapping[str, Any]) -> str | None:
    record_id = _id_value(doc.get(descriptor.id_field))
    if record_id is not None or descriptor.kind != _MODULE_KIND:
        return record_id
    packages = doc.get("module")
    if isinstance(packages, list):
        for package in packages:
            if isinstance(package, Mapping):
                name = _id_value(package.get("name"))
                if name is not None:
                    return name
    return None


def _id_value(value: Any) -> str | None:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        return None
    text = str(value).strip()
    return text or None
