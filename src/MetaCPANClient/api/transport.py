"""HTTP transport for the MetaCPAN API.

The transport only moves bytes: it builds URLs, sends requests and hands back
the raw status and body. Decoding and error mapping happen in
`MetaCPANClient.api.request`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Protocol
from urllib.parse import quote

import requests

from MetaCPANClient.core.errors import TransportError
from MetaCPANClient.utils.log import log

DEFAULT_BASE_URL = "https://fastapi.metacpan.org/v1"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Raw outcome of one HTTP exchange.

    Attributes:
        status: HTTP status code.
        content: Response body bytes.
        reason: Status reason phrase or failure description.
    """

    status: int
    content: bytes
    reason: str = ""

    @property
    def success(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    """Protocol for the object performing the network round trip."""

    def get(self, path: str, params: Mapping[str, Any] | None = None) -> TransportResponse:
        """Issue a GET request for `path` with query parameters."""
        raise NotImplementedError

    def post(self, path: str, body: bytes) -> TransportResponse:
        """Issue a POST request for `path` with a JSON body."""
        raise NotImplementedError

    def close(self) -> None:
        """Release resources held by the transport."""
        raise NotImplementedError


def encode_params(params: Mapping[str, Any] | None) -> str:
    """Encode GET parameters into a deterministic query string.

    Pairs are sorted by key and values percent-encoded. When any value is a
    nested structure, the whole parameter set is sent as JSON under a single
    ``source`` key instead.

    Args:
        params: Parameter mapping.

    Returns:
        Query string without the leading ``?`` (empty when no params).
    """
    if not params:
        return ""
    items: Mapping[str, Any] = params
    if any(isinstance(value, (Mapping, list, tuple)) for value in params.values()):
        items = {"source": json.dumps(params, sort_keys=True, separators=(",", ":"))}
    return "&".join(f"{key}={quote(_param_text(items[key]), safe='')}" for key in sorted(items))


def _param_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class HttpTransport:
    """`requests`-backed transport bound to one base URL.

    A transport is shared by every lookup and result set of a client; it
    keeps a single pooled session for the client's lifetime.
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            base_url: API root, without trailing slash.
            user_agent: Value sent as the ``User-Agent`` header.
            timeout: Per-request timeout in seconds.
            session: Optional pre-built session (tests, custom adapters).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "User-Agent": user_agent,
                "Accept": "application/json",
            }
        )

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def url_for(self, path: str, params: Mapping[str, Any] | None = None) -> str:
        """Build the absolute URL for an API path."""
        url = f"{self.base_url}/{path.lstrip('/')}"
        query = encode_params(params)
        return f"{url}?{query}" if query else url

    def get(self, path: str, params: Mapping[str, Any] | None = None) -> TransportResponse:
        url = self.url_for(path, params)
        log.debug("GET %s", url)
        return self._send("GET", url, path=path)

    def post(self, path: str, body: bytes) -> TransportResponse:
        url = self.url_for(path)
        log.debug("POST %s bytes=%d", url, len(body))
        return self._send(
            "POST",
            url,
            path=path,
            data=body,
            headers={"Content-Type": "application/json"},
        )

    def _send(self, method: str, url: str, *, path: str, **kwargs: Any) -> TransportResponse:
        try:
            resp = self._session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as error:
            raise TransportError(path, str(error)) from error
        log.debug("%s %s -> status=%s bytes=%s", method, url, resp.status_code, len(resp.content))
        return TransportResponse(status=resp.status_code, content=resp.content, reason=resp.reason or "")
