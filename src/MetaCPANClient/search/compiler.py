"""Search spec compiler.

Compiles a search spec into the boolean query document the MetaCPAN search
backend (Elasticsearch) expects.

Rules
- A value containing ``*`` becomes a wildcard clause, anything else an exact
  term clause:
    {"name": "Dave *"}  -> {"wildcard": {"name": "Dave *"}}
    {"pauseid": "DOY"}  -> {"term": {"pauseid": "DOY"}}
- A simple spec with one field compiles to its single leaf clause; with
  several fields the leaves are joined under ``must``, in field order.
- ``either`` -> ``bool.should``  (at least one child matches)
- ``all``    -> ``bool.must``    (every child matches)
- ``not``    -> ``bool.must_not`` on the same bool as its either/all

Children compile recursively, so groups nest as deep as the spec does.
Compilation is pure and deterministic: equal specs yield equal documents and
`compile_request_body` serialises them byte for byte the same.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from MetaCPANClient.core.query import (
    WILDCARD,
    AllSpec,
    EitherSpec,
    Scalar,
    SearchSpec,
    SimpleSpec,
    parse_search_spec,
)

CompiledQuery = dict[str, Any]


def compile_search_spec(spec: SearchSpec | Mapping[str, Any]) -> CompiledQuery:
    """Compile a search spec into a backend query document.

    Args:
        spec: Typed spec or raw spec mapping.

    Returns:
        Query document (the value of the request's ``query`` key).

    Raises:
        InvalidSpecShape: If a raw mapping is not a well-formed spec.
    """
    return _compile(parse_search_spec(spec))


def build_search_body(query: CompiledQuery, *, offset: int, size: int) -> dict[str, Any]:
    """Wrap a compiled query with its pagination window."""
    return {"query": query, "from": offset, "size": size}


def compile_request_body(body: Mapping[str, Any]) -> bytes:
    """Serialise a request body canonically (sorted keys, compact)."""
    return json.dumps(body, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _compile(spec: SearchSpec) -> CompiledQuery:
    if isinstance(spec, EitherSpec):
        return _group("should", spec.children, spec.exclude)
    if isinstance(spec, AllSpec):
        return _group("must", spec.children, spec.exclude)
    return _compile_simple(spec)


def _group(occur: str, children: tuple[SearchSpec, ...], exclude: tuple[SearchSpec, ...]) -> CompiledQuery:
    clauses: dict[str, Any] = {occur: [_compile(child) for child in children]}
    if exclude:
        clauses["must_not"] = [_compile(child) for child in exclude]
    return {"bool": clauses}


def _compile_simple(spec: SimpleSpec) -> CompiledQuery:
    leaves = [_leaf(field, value) for field, value in spec.fields]
    if len(leaves) == 1:
        return leaves[0]
    return {"bool": {"must": leaves}}


def _leaf(field: str, value: Scalar) -> CompiledQuery:
    if isinstance(value, str) and WILDCARD in value:
        return {"wildcard": {field: value}}
    return {"term": {field: value}}
