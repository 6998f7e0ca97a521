"""MetaCPAN client facade.

One entry point per entity kind. Each accepts either an id, which fetches a
single record, or a search spec, which returns a lazy `ResultSet`::

    client = MetaCPANClient()
    author = client.author("XSAWYERX")
    daves = client.author({"either": [{"name": "Dave *"}, {"name": "David *"}]})
    for record in daves:
        print(record.id, record.name)
"""

from __future__ import annotations

from typing import Any, Mapping

from MetaCPANClient.api.request import ApiRequest
from MetaCPANClient.api.transport import HttpTransport, Transport
from MetaCPANClient.config.api import ApiConfig
from MetaCPANClient.core.errors import EntityNotImplemented
from MetaCPANClient.core.models import Distribution, EntityRecord
from MetaCPANClient.services.dispatch import Dispatcher, LookupArg
from MetaCPANClient.services.resultset import ResultSet
from MetaCPANClient.services.reverse_deps import reverse_dependencies


class MetaCPANClient:
    """Typed, read-only client for the MetaCPAN API.

    The configuration is fixed at construction. The transport is shared by
    every lookup and result set the client produces.
    """

    def __init__(self, config: ApiConfig | None = None, *, transport: Transport | None = None) -> None:
        """Initialize the client.

        Args:
            config: Connection settings; defaults to the public API.
            transport: Optional transport; by default an `HttpTransport`
                built from `config`.
        """
        self._config = config or ApiConfig()
        self._transport = transport or HttpTransport(
            base_url=self._config.base_url,
            user_agent=self._config.user_agent,
            timeout=self._config.timeout,
        )
        self._request = ApiRequest(self._transport)
        self._dispatcher = Dispatcher(request=self._request, page_size=self._config.page_size)

    @property
    def config(self) -> ApiConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def close(self) -> None:
        """Close the underlying transport."""
        self._transport.close()

    def __enter__(self) -> MetaCPANClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def lookup(self, kind: str, arg: LookupArg) -> EntityRecord | ResultSet:
        """Fetch a record by id or search records of any kind."""
        return self._dispatcher.lookup(kind, arg)

    def author(self, arg: LookupArg) -> EntityRecord | ResultSet:
        return self.lookup("author", arg)

    def module(self, arg: LookupArg) -> EntityRecord | ResultSet:
        return self.lookup("module", arg)

    def distribution(self, arg: LookupArg) -> EntityRecord | ResultSet:
        return self.lookup("distribution", arg)

    def release(self, arg: LookupArg) -> EntityRecord | ResultSet:
        return self.lookup("release", arg)

    def file(self, arg: LookupArg) -> EntityRecord | ResultSet:
        return self.lookup("file", arg)

    def favorite(self, arg: LookupArg) -> EntityRecord | ResultSet:
        return self.lookup("favorite", arg)

    def rating(self, arg: LookupArg) -> EntityRecord | ResultSet:
        return self.lookup("rating", arg)

    def pod(self, arg: LookupArg) -> EntityRecord | ResultSet:
        """Pod rendering is not supported by this client."""
        raise EntityNotImplemented("pod")

    def reverse_dependencies(self, module_name: str) -> list[Distribution]:
        """Return distributions whose latest release requires `module_name`."""
        return reverse_dependencies(self._dispatcher, module_name)

    def fetch(self, path: str, **params: Any) -> Any:
        """GET any API path and return the decoded JSON."""
        return self._request.fetch(path, **params)

    def post(self, path: str, query: Mapping[str, Any]) -> Any:
        """POST a JSON document to any API path and return the decoded JSON."""
        return self._request.post(path, query)
