"""Lazily paginated search results.

A `ResultSet` wraps a compiled query and walks the backend's hits page by
page with offset-based pagination:

    CREATED --first size()/next()--> PAGING --offset >= total--> EXHAUSTED

Nothing is fetched while the set is CREATED. Pages are requested strictly in
increasing offset order with a constant page size, and records are yielded in
backend order. EXHAUSTED is terminal: further advancement returns nothing and
issues no requests. A result set is forward only; build a new one from the
same query for a fresh pass.
"""

from __future__ import annotations

import threading
from collections import deque
from enum import Enum
from typing import Iterator

from MetaCPANClient.api.request import ApiRequest
from MetaCPANClient.core.models import EntityRecord
from MetaCPANClient.entities.parser import parse_search_page
from MetaCPANClient.entities.registry import EntityDescriptor
from MetaCPANClient.search.compiler import CompiledQuery, build_search_body
from MetaCPANClient.utils.log import log

DEFAULT_PAGE_SIZE = 100


class ResultSetState(str, Enum):
    CREATED = "created"
    PAGING = "paging"
    EXHAUSTED = "exhausted"


class ResultSet:
    """Forward-only iterator over the records matching a compiled query.

    The cursor is guarded by a lock, so concurrent callers are serialised
    rather than interleaving page fetches.
    """

    def __init__(
        self,
        *,
        request: ApiRequest,
        descriptor: EntityDescriptor,
        query: CompiledQuery,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        """Initialize an unfetched result set.

        Args:
            request: Request helper bound to the shared transport.
            descriptor: Kind the hits decode into.
            query: Compiled query document.
            page_size: Hits requested per page, fixed for the set's lifetime.
        """
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self._request = request
        self._descriptor = descriptor
        self._query = query
        self._page_size = page_size

        self._state = ResultSetState.CREATED
        self._total: int | None = None
        self._offset = 0
        self._yielded = 0
        self._buffer: deque[EntityRecord] = deque()
        self._lock = threading.Lock()

    @property
    def kind(self) -> str:
        return self._descriptor.kind

    @property
    def query(self) -> CompiledQuery:
        return self._query

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def state(self) -> ResultSetState:
        return self._state

    @property
    def total(self) -> int:
        """Total hit count reported by the backend (fetches the first page)."""
        with self._lock:
            if self._state is ResultSetState.CREATED:
                self._fetch_page()
            assert self._total is not None
            return self._total

    def size(self) -> int:
        return self.total

    def next(self) -> EntityRecord | None:
        """Return the next record, or None once the set is exhausted."""
        with self._lock:
            return self._advance()

    def all(self) -> list[EntityRecord]:
        """Drain and return every remaining record."""
        with self._lock:
            out: list[EntityRecord] = []
            while True:
                record = self._advance()
                if record is None:
                    return out
                out.append(record)

    def __iter__(self) -> Iterator[EntityRecord]:
        return self

    def __next__(self) -> EntityRecord:
        record = self.next()
        if record is None:
            raise StopIteration
        return record

    def __repr__(self) -> str:
        return (
            f"ResultSet(kind={self.kind!r}, state={self._state.value}, "
            f"total={self._total}, offset={self._offset}, yielded={self._yielded})"
        )

    def _advance(self) -> EntityRecord | None:
        if self._state is ResultSetState.CREATED:
            self._fetch_page()
        while not self._buffer:
            if self._state is ResultSetState.EXHAUSTED:
                return None
            self._fetch_page()

        record = self._buffer.popleft()
        self._yielded += 1
        assert self._total is not None
        if self._yielded >= self._total:
            # The backend may report fewer hits than it returns; never yield past total.
            self._buffer.clear()
            self._state = ResultSetState.EXHAUSTED
        return record

    def _fetch_page(self) -> None:
        body = build_search_body(self._query, offset=self._offset, size=self._page_size)
        log.debug(
            "Search page: kind=%s offset=%d size=%d",
            self._descriptor.kind,
            self._offset,
            self._page_size,
        )
        payload = self._request.post(self._descriptor.search_path, body)
        total, records = parse_search_page(self._descriptor, payload)

        self._total = total
        self._offset += len(records)
        self._buffer.extend(records)
        log.debug(
            "Search page fetched: kind=%s records=%d offset=%d total=%d",
            self._descriptor.kind,
            len(records),
            self._offset,
            total,
        )

        if not records or self._offset >= total:
            self._state = ResultSetState.EXHAUSTED
        else:
            self._state = ResultSetState.PAGING
        if self._yielded >= total:
            self._buffer.clear()
            self._state = ResultSetState.EXHAUSTED
