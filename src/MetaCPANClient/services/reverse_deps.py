"""Reverse dependency resolution.

Finds the distributions whose latest release declares a runtime requirement
on a module. The answer is materialised eagerly: callers get a finite list,
not a stream.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from dateutil import parser as dt_parser

from MetaCPANClient.core.models import Distribution, EntityRecord
from MetaCPANClient.core.query import AllSpec, SimpleSpec
from MetaCPANClient.entities.registry import describe
from MetaCPANClient.utils.log import log

if TYPE_CHECKING:
    from MetaCPANClient.services.dispatch import Dispatcher

# Large enough to cover the dependents of any CPAN module in one page.
REVERSE_DEPS_PAGE_SIZE = 5000
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def build_reverse_deps_spec(module_name: str) -> AllSpec:
    """Build the release search spec for dependents of `module_name`."""
    return AllSpec(
        children=(
            SimpleSpec.of(**{"dependency.module": module_name}),
            SimpleSpec.of(**{"dependency.relationship": "requires"}),
            SimpleSpec.of(**{"dependency.phase": "runtime"}),
            SimpleSpec.of(status="latest", authorized=True),
        )
    )


def reverse_dependencies(dispatcher: Dispatcher, module_name: str) -> list[Distribution]:
    """Return the distributions that require `module_name` at runtime.

    Only the newest matching release of each distribution is kept. Output
    follows the order in which distributions first appear in the hits.

    Args:
        dispatcher: Dispatcher bound to the client's transport.
        module_name: Module name (e.g. ``Moose::Role``).

    Returns:
        Distribution records, one per depending distribution.

    Raises:
        TransportError: On network or backend failure.
        DecodeError: If a page of hits is malformed.
    """
    name = module_name.strip()
    if not name:
        raise ValueError("module name must not be empty")

    results = dispatcher.search(
        describe("release"),
        build_reverse_deps_spec(name),
        page_size=REVERSE_DEPS_PAGE_SIZE,
    )

    winners: dict[str, EntityRecord] = {}
    for release in results:
        dist = _distribution_of(release)
        existing = winners.get(dist)
        if existing is None:
            winners[dist] = release
        elif _release_date(release) > _release_date(existing):
            log.debug("Reverse deps: %s supersedes %s for %s", release.id, existing.id, dist)
            winners[dist] = release

    log.debug("Reverse deps for %s: %d distributions", name, len(winners))
    return [_to_distribution(dist, release) for dist, release in winners.items()]


def _distribution_of(release: EntityRecord) -> str:
    dist = release.get("distribution")
    if isinstance(dist, str) and dist.strip():
        return dist.strip()
    # Fall back to the release name minus its version suffix.
    head, sep, _ = release.id.rpartition("-")
    return head if sep else release.id


def _release_date(release: EntityRecord) -> datetime:
    raw = release.get("date")
    if not isinstance(raw, str) or not raw.strip():
        return _EPOCH
    try:
        parsed = dt_parser.isoparse(raw)
    except (TypeError, ValueError):
        return _EPOCH
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def _to_distribution(dist: str, release: EntityRecord) -> Distribution:
    return Distribution(
        id=dist,
        data={
            "name": dist,
            "release": release.id,
            "version": release.get("version"),
            "author": release.get("author"),
            "date": release.get("date"),
        },
    )
