"""Tests for the HTTP transport and response decoding."""

import json
import sys
import unittest
from pathlib import Path
from unittest.mock import MagicMock
from urllib.parse import quote

import requests

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from MetaCPANClient.api.request import ApiRequest, decode_result
from MetaCPANClient.api.transport import HttpTransport, TransportResponse, encode_params
from MetaCPANClient.core.errors import DecodeError, NotFoundError, TransportError


def _make_session(status: int = 200, content: bytes = b"{}", reason: str = "OK") -> MagicMock:
    session = MagicMock()
    session.headers = {}
    response = MagicMock()
    response.status_code = status
    response.content = content
    response.reason = reason
    session.request.return_value = response
    return session


class _RecordingTransport:
    def __init__(self, response: TransportResponse) -> None:
        self.response = response
        self.calls: list[tuple] = []

    def get(self, path, params=None):
        self.calls.append(("GET", path, params))
        return self.response

    def post(self, path, body):
        self.calls.append(("POST", path, body))
        return self.response

    def close(self) -> None:
        return


class TestEncodeParams(unittest.TestCase):
    def test_pairs_are_sorted_and_escaped(self) -> None:
        self.assertEqual(encode_params({"size": 10, "q": "name:Dave Rolsky"}), "q=name%3ADave%20Rolsky&size=10")

    def test_empty_params(self) -> None:
        self.assertEqual(encode_params({}), "")
        self.assertEqual(encode_params(None), "")

    def test_unreserved_characters_are_kept(self) -> None:
        self.assertEqual(encode_params({"fields": "a_b.c-d~e"}), "fields=a_b.c-d~e")

    def test_booleans_are_lowercase(self) -> None:
        self.assertEqual(encode_params({"authorized": True}), "authorized=true")

    def test_nested_values_switch_to_json_source(self) -> None:
        params = {"size": 10, "query": {"match_all": {}}}

        encoded = encode_params(params)

        expected_json = json.dumps(params, sort_keys=True, separators=(",", ":"))
        self.assertEqual(encoded, "source=" + quote(expected_json, safe=""))
        self.assertEqual(expected_json, '{"query":{"match_all":{}},"size":10}')


class TestHttpTransport(unittest.TestCase):
    def test_get_builds_url_with_params(self) -> None:
        session = _make_session()
        transport = HttpTransport(base_url="https://example.test/v1/", user_agent="ua/1", timeout=5.0, session=session)

        response = transport.get("/author/DOY", {"b": "2", "a": "1"})

        session.request.assert_called_once_with("GET", "https://example.test/v1/author/DOY?a=1&b=2", timeout=5.0)
        self.assertEqual(response.status, 200)
        self.assertTrue(response.success)

    def test_post_sends_json_content_type(self) -> None:
        session = _make_session()
        transport = HttpTransport(base_url="https://example.test/v1", user_agent="ua/1", timeout=5.0, session=session)

        transport.post("author/_search", b'{"query":{}}')

        session.request.assert_called_once_with(
            "POST",
            "https://example.test/v1/author/_search",
            timeout=5.0,
            data=b'{"query":{}}',
            headers={"Content-Type": "application/json"},
        )

    def test_user_agent_is_set_on_session(self) -> None:
        session = _make_session()
        HttpTransport(user_agent="MetaCPANClient/test", session=session)
        self.assertEqual(session.headers["User-Agent"], "MetaCPANClient/test")

    def test_non_success_status_is_returned_not_raised(self) -> None:
        session = _make_session(status=503, content=b"", reason="Service Unavailable")
        transport = HttpTransport(user_agent="ua", session=session)

        response = transport.get("author/DOY")

        self.assertEqual(response.status, 503)
        self.assertFalse(response.success)
        self.assertEqual(response.reason, "Service Unavailable")

    def test_network_errors_become_transport_errors(self) -> None:
        session = _make_session()
        session.request.side_effect = requests.ConnectionError("connection refused")
        transport = HttpTransport(user_agent="ua", session=session)

        with self.assertRaises(TransportError) as ctx:
            transport.get("author/DOY")

        self.assertEqual(ctx.exception.path, "author/DOY")
        self.assertIn("connection refused", ctx.exception.reason)
        self.assertIsNone(ctx.exception.status)

    def test_close_closes_session(self) -> None:
        session = _make_session()
        with HttpTransport(user_agent="ua", session=session):
            pass
        session.close.assert_called_once_with()


class TestDecodeResult(unittest.TestCase):
    def test_success_returns_decoded_json(self) -> None:
        payload = decode_result(TransportResponse(status=200, content=b'{"pauseid": "DOY"}'), "author/DOY")
        self.assertEqual(payload, {"pauseid": "DOY"})

    def test_404_is_not_found(self) -> None:
        with self.assertRaises(NotFoundError) as ctx:
            decode_result(TransportResponse(status=404, content=b'{"message": "Not found"}'), "author/NOPE")
        self.assertEqual(ctx.exception.path, "author/NOPE")

    def test_server_error_is_transport_error(self) -> None:
        with self.assertRaises(TransportError) as ctx:
            decode_result(TransportResponse(status=502, content=b"", reason="Bad Gateway"), "author/DOY")
        self.assertEqual(ctx.exception.status, 502)
        self.assertEqual(ctx.exception.reason, "Bad Gateway")

    def test_missing_reason_falls_back_to_status(self) -> None:
        with self.assertRaisesRegex(TransportError, "HTTP 500"):
            decode_result(TransportResponse(status=500, content=b""), "author/DOY")

    def test_empty_body_is_decode_error(self) -> None:
        with self.assertRaises(DecodeError):
            decode_result(TransportResponse(status=200, content=b""), "author/DOY")

    def test_invalid_json_is_decode_error(self) -> None:
        with self.assertRaisesRegex(DecodeError, "Couldn't decode"):
            decode_result(TransportResponse(status=200, content=b"<html>oops</html>"), "author/DOY")


class TestApiRequest(unittest.TestCase):
    def test_post_serialises_canonically(self) -> None:
        transport = _RecordingTransport(TransportResponse(status=200, content=b"{}"))
        request = ApiRequest(transport)

        request.post("release/_search", {"size": 10, "query": {"term": {"b": 1, "a": 2}}})

        self.assertEqual(
            transport.calls,
            [("POST", "release/_search", b'{"query":{"term":{"a":2,"b":1}},"size":10}')],
        )

    def test_fetch_passes_params(self) -> None:
        transport = _RecordingTransport(TransportResponse(status=200, content=b'{"ok": true}'))
        request = ApiRequest(transport)

        self.assertEqual(request.fetch("release/Moose", fields="name"), {"ok": True})
        self.assertEqual(transport.calls, [("GET", "release/Moose", {"fields": "name"})])

    def test_fetch_requires_path(self) -> None:
        request = ApiRequest(_RecordingTransport(TransportResponse(status=200, content=b"{}")))
        with self.assertRaises(ValueError):
            request.fetch("")

    def test_post_requires_mapping(self) -> None:
        request = ApiRequest(_RecordingTransport(TransportResponse(status=200, content=b"{}")))
        with self.assertRaises(TypeError):
            request.post("release/_search", ["not", "a", "mapping"])  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
