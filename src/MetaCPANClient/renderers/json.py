"""JSON output renderers.

Renders records into JSON-serializable objects. The JSON writer collects
every block of a command and prints one document on finalize, so the output
stays machine readable.
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Sequence

import click

from MetaCPANClient.core.models import EntityRecord
from MetaCPANClient.renderers.base import OutputWriter


def render_json(records: Iterable[EntityRecord]) -> list[dict[str, Any]]:
    """Render records into JSON-serializable Python objects."""
    return [
        {
            "kind": record.kind,
            "id": record.id,
            "data": dict(record.data),
        }
        for record in records
    ]


class JsonOutputWriter(OutputWriter):
    """Accumulate results and print them as one JSON document on finalize."""

    def __init__(self) -> None:
        self.all_results: list[dict[str, Any]] = []

    def write_records(
        self,
        records: Sequence[EntityRecord],
        *,
        title: str,
        total: int | None = None,
    ) -> None:
        self.all_results.append(
            {
                "title": title,
                "total": total,
                "records": render_json(records),
            }
        )

    def finalize(self, action: str) -> None:
        payload = {"action": action, "results": self.all_results}
        click.echo(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True))
