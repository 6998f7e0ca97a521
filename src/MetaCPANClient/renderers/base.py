"""Base classes for output writers.

Separates command control flow from how records are presented.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from MetaCPANClient.core.models import EntityRecord


class OutputWriter(ABC):
    """Abstract base class for command output writers."""

    @abstractmethod
    def write_records(
        self,
        records: Sequence[EntityRecord],
        *,
        title: str,
        total: int | None = None,
    ) -> None:
        """Write one block of records.

        Args:
            records: Records to present, in display order.
            title: Short description of what was looked up.
            total: Total hit count when the records are a search page.
        """

    @abstractmethod
    def finalize(self, action: str) -> None:
        """Flush accumulated output.

        Args:
            action: The CLI command name (e.g., 'search').
        """
