"""Tests for reverse dependency resolution."""

from __future__ import annotations

import json
import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from MetaCPANClient import MetaCPANClient
from MetaCPANClient.api.transport import TransportResponse
from MetaCPANClient.core.errors import TransportError
from MetaCPANClient.core.models import Distribution
from MetaCPANClient.search.compiler import compile_search_spec
from MetaCPANClient.services.reverse_deps import REVERSE_DEPS_PAGE_SIZE, build_reverse_deps_spec


def _release(name: str, distribution: str | None, date: str | None, version: str = "1.0") -> dict:
    source = {"name": name, "version": version, "author": "ETHER", "status": "latest"}
    if distribution is not None:
        source["distribution"] = distribution
    if date is not None:
        source["date"] = date
    return {"_id": f"id-{name}", "_source": source}


def _hits(releases: list[dict]) -> TransportResponse:
    payload = {"hits": {"total": len(releases), "hits": releases}}
    return TransportResponse(status=200, content=json.dumps(payload).encode("utf-8"))


class _StubTransport:
    def __init__(self, responses: list[TransportResponse]) -> None:
        self._responses = list(responses)
        self.calls: list[tuple] = []

    def get(self, path, params=None):
        raise AssertionError("reverse dependencies only search")

    def post(self, path, body):
        self.calls.append((path, json.loads(body)))
        return self._responses.pop(0)

    def close(self) -> None:
        return


class TestReverseDependencies(unittest.TestCase):
    def test_newer_release_of_same_distribution_wins(self) -> None:
        transport = _StubTransport(
            [
                _hits(
                    [
                        _release("Foo-1.0", "Foo", "2020-01-01T00:00:00", "1.0"),
                        _release("Bar-2.0", "Bar", "2019-06-01T00:00:00", "2.0"),
                        _release("Foo-1.1", "Foo", "2021-03-04T05:06:07", "1.1"),
                    ]
                )
            ]
        )
        client = MetaCPANClient(transport=transport)

        result = client.reverse_dependencies("Moose")

        self.assertIsInstance(result, list)
        self.assertEqual([dist.name for dist in result], ["Foo", "Bar"])
        self.assertTrue(all(isinstance(dist, Distribution) for dist in result))
        foo = result[0]
        self.assertEqual(foo.get("release"), "Foo-1.1")
        self.assertEqual(foo.get("version"), "1.1")
        self.assertEqual(foo.get("date"), "2021-03-04T05:06:07")

    def test_older_release_seen_later_does_not_replace(self) -> None:
        transport = _StubTransport(
            [
                _hits(
                    [
                        _release("Foo-1.1", "Foo", "2021-03-04T05:06:07", "1.1"),
                        _release("Foo-1.0", "Foo", "2020-01-01T00:00:00", "1.0"),
                    ]
                )
            ]
        )

        result = MetaCPANClient(transport=transport).reverse_dependencies("Moose")

        self.assertEqual(len(result), 1)
        self.assertEqual(result[0].get("release"), "Foo-1.1")

    def test_missing_distribution_falls_back_to_release_name(self) -> None:
        transport = _StubTransport([_hits([_release("Baz-Qux-0.01", None, None)])])

        result = MetaCPANClient(transport=transport).reverse_dependencies("Moose")

        self.assertEqual([dist.name for dist in result], ["Baz-Qux"])

    def test_search_request_shape(self) -> None:
        transport = _StubTransport([_hits([])])

        result = MetaCPANClient(transport=transport).reverse_dependencies("Moose::Role")

        self.assertEqual(result, [])
        self.assertEqual(len(transport.calls), 1)
        path, body = transport.calls[0]
        self.assertEqual(path, "release/_search")
        self.assertEqual(body["size"], REVERSE_DEPS_PAGE_SIZE)
        self.assertEqual(body["from"], 0)
        self.assertEqual(body["query"], compile_search_spec(build_reverse_deps_spec("Moose::Role")))

    def test_spec_requires_runtime_dependency_on_latest_release(self) -> None:
        compiled = compile_search_spec(build_reverse_deps_spec("Moose"))

        must = compiled["bool"]["must"]
        self.assertIn({"term": {"dependency.module": "Moose"}}, must)
        self.assertIn({"term": {"dependency.relationship": "requires"}}, must)
        self.assertIn({"term": {"dependency.phase": "runtime"}}, must)
        self.assertIn(
            {"bool": {"must": [{"term": {"authorized": True}}, {"term": {"status": "latest"}}]}},
            must,
        )

    def test_pages_through_large_answers(self) -> None:
        total = REVERSE_DEPS_PAGE_SIZE + 1
        first = {
            "hits": {
                "total": total,
                "hits": [_release(f"D{i}-1", f"D{i}", None) for i in range(REVERSE_DEPS_PAGE_SIZE)],
            }
        }
        second = {"hits": {"total": total, "hits": [_release("Last-1", "Last", None)]}}
        transport = _StubTransport(
            [
                TransportResponse(status=200, content=json.dumps(first).encode("utf-8")),
                TransportResponse(status=200, content=json.dumps(second).encode("utf-8")),
            ]
        )

        result = MetaCPANClient(transport=transport).reverse_dependencies("Moose")

        self.assertEqual(len(result), REVERSE_DEPS_PAGE_SIZE + 1)
        self.assertEqual(result[-1].name, "Last")
        self.assertEqual([call[1]["from"] for call in transport.calls], [0, REVERSE_DEPS_PAGE_SIZE])

    def test_empty_module_name_is_rejected(self) -> None:
        transport = _StubTransport([])
        with self.assertRaises(ValueError):
            MetaCPANClient(transport=transport).reverse_dependencies("  ")
        self.assertEqual(transport.calls, [])

    def test_transport_failure_propagates(self) -> None:
        transport = _StubTransport([TransportResponse(status=502, content=b"", reason="Bad Gateway")])
        with self.assertRaises(TransportError):
            MetaCPANClient(transport=transport).reverse_dependencies("Moose")


if __name__ == "__main__":
    unittest.main()
