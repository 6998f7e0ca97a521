"""Request helpers with result decoding.

Wraps a `Transport` with JSON decoding and maps raw outcomes onto the client
error taxonomy:

- 404                    -> NotFoundError
- any other non-2xx      -> TransportError
- empty / non-JSON body  -> DecodeError
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from MetaCPANClient.api.transport import Transport, TransportResponse
from MetaCPANClient.core.errors import DecodeError, NotFoundError, TransportError
from MetaCPANClient.search.compiler import compile_request_body

_CONTENT_PREVIEW = 200


class ApiRequest:
    """Issues API calls through a shared transport and decodes the bodies."""

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    def fetch(self, path: str, **params: Any) -> Any:
        """GET an API path and return the decoded JSON.

        Args:
            path: Path relative to the base URL (e.g. ``author/DOY``).
            **params: Extra GET parameters; nested values switch the whole
                set to a JSON ``source`` parameter.

        Returns:
            Decoded JSON body.
        """
        if not path:
            raise ValueError("fetch must be called with a path")
        return decode_result(self.transport.get(path, params), path)

    def post(self, path: str, query: Mapping[str, Any]) -> Any:
        """POST a JSON document to an API path and return the decoded JSON.

        The body is serialised canonically so identical documents always go
        over the wire as identical bytes.
        """
        if not path:
            raise ValueError("post must be called with a path")
        if not isinstance(query, Mapping):
            raise TypeError("post query must be a mapping")
        return decode_result(self.transport.post(path, compile_request_body(query)), path)

    def close(self) -> None:
        self.transport.close()


def decode_result(response: TransportResponse, path: str) -> Any:
    """Decode a transport response or raise the matching client error."""
    if response.status == 404:
        raise NotFoundError(path)
    if not response.success:
        reason = response.reason or f"HTTP {response.status}"
        raise TransportError(path, reason, status=response.status)
    if not response.content:
        raise DecodeError(f"Missing content in response for '{path}'")
    try:
        return json.loads(response.content)
    except (UnicodeDecodeError, ValueError) as error:
        preview = response.content[:_CONTENT_PREVIEW].decode("utf-8", errors="replace")
        raise DecodeError(f"Couldn't decode response for '{path}': {preview!r}: {error}") from error
