"""Console text output renderers.

Renders records into human-friendly text and writes them through the
package logger.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from MetaCPANClient.core.models import EntityRecord
from MetaCPANClient.renderers.base import OutputWriter
from MetaCPANClient.utils.log import log

# Fields shown under each record, when present, in this order.
_SUMMARY_FIELDS = (
    "name",
    "distribution",
    "version",
    "author",
    "date",
    "status",
    "abstract",
    "release",
    "path",
    "user",
    "rating",
)


def render_text(records: Iterable[EntityRecord]) -> str:
    """Render records into a human-readable text block.

    Args:
        records: Iterable of records.

    Returns:
        A formatted string ready to be printed.
    """
    lines: list[str] = []
    for idx, record in enumerate(records, start=1):
        lines.append(f"{idx}. [{record.kind}] {record.id}")
        for key in _SUMMARY_FIELDS:
            value = record.get(key)
            if value is None or value == "" or (key == "name" and value == record.id):
                continue
            if isinstance(value, (list, tuple)):
                value = ", ".join(str(item) for item in value)
            lines.append(f"   {key.capitalize()}: {value}")
        lines.append("")
    if not lines:
        return "(no records)\n"
    return "\n".join(lines).rstrip() + "\n"


class ConsoleOutputWriter(OutputWriter):
    """Write records to console via logging."""

    def write_records(
        self,
        records: Sequence[EntityRecord],
        *,
        title: str,
        total: int | None = None,
    ) -> None:
        if total is None:
            log.info("=== %s ===", title)
        else:
            log.info("=== %s (showing %d of %d) ===", title, len(records), total)
        for line in render_text(records).splitlines():
            log.info(line)

    def finalize(self, action: str) -> None:
        """No-op for console output."""
