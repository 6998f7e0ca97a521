"""Command implementations for the MetaCPANClient CLI.

Encapsulates what each command does with the client, separated from CLI
parameter handling and output formatting.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from MetaCPANClient.client import MetaCPANClient
from MetaCPANClient.core.errors import NotFoundError
from MetaCPANClient.core.models import EntityRecord
from MetaCPANClient.renderers import OutputWriter
from MetaCPANClient.services.resultset import ResultSet
from MetaCPANClient.utils.log import log


class Command(Protocol):
    """Protocol for commands run by `CommandRunner`."""

    def execute(self, client: MetaCPANClient, writer: OutputWriter) -> None:
        """Run the command against a client, writing results to `writer`."""
        raise NotImplementedError


@dataclass(slots=True)
class GetCommand:
    """Fetch one record by id."""

    kind: str
    record_id: str

    def execute(self, client: MetaCPANClient, writer: OutputWriter) -> None:
        title = f"{self.kind} {self.record_id}"
        try:
            record = client.lookup(self.kind, self.record_id)
        except NotFoundError:
            log.warning("No %s found for id=%s", self.kind, self.record_id)
            writer.write_records([], title=title)
            return
        assert isinstance(record, EntityRecord)
        writer.write_records([record], title=title)


@dataclass(slots=True)
class SearchCommand:
    """Search records of one kind and print the first `max_results`."""

    kind: str
    spec: Mapping[str, Any]
    max_results: int

    def execute(self, client: MetaCPANClient, writer: OutputWriter) -> None:
        results = client.lookup(self.kind, self.spec)
        assert isinstance(results, ResultSet)
        log.debug("Search %s query=%s", self.kind, results.query)

        records: list[EntityRecord] = []
        for record in results:
            records.append(record)
            if self.max_results != -1 and len(records) >= self.max_results:
                break
        writer.write_records(records, title=f"{self.kind} search", total=results.total)


@dataclass(slots=True)
class ReverseDependenciesCommand:
    """List distributions depending on a module."""

    module_name: str

    def execute(self, client: MetaCPANClient, writer: OutputWriter) -> None:
        distributions = client.reverse_dependencies(self.module_name)
        log.info("Found %d distributions depending on %s", len(distributions), self.module_name)
        writer.write_records(
            distributions,
            title=f"reverse dependencies of {self.module_name}",
            total=len(distributions),
        )
