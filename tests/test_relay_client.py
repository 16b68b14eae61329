from __future__ import annotations

import json
import unittest
from unittest.mock import patch

import requests

from app.ingestion.relay_client import (
    FetchFailed,
    SourceFetcher,
    StrategyError,
    default_strategies,
    fetch_upstream,
)
from app.ingestion.sources import RawSource

SOURCE = RawSource("MaxBet", "https://maxbet.rs/restapi/offer/en/init")
OFFER = {"esMatches": [{"id": 1, "home": "Herediano", "away": "Liberia"}]}
_NOT_JSON = object()


class _FakeResponse:
    def __init__(self, status_code: int, payload, text: str | None = None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else str(payload)

    def json(self):
        if self._payload is _NOT_JSON:
            raise ValueError("Expecting value")
        return self._payload


def _fetcher() -> SourceFetcher:
    return SourceFetcher(strategies=default_strategies("http://relay.test/api/proxy"), timeout=2.0)


class SourceFetcherTests(unittest.TestCase):
    def test_local_relay_success_stops_chain(self) -> None:
        with patch(
            "app.ingestion.relay_client.requests.get",
            return_value=_FakeResponse(200, OFFER),
        ) as mock_get:
            result = _fetcher().fetch(SOURCE)

        self.assertEqual("local-relay", result.strategy)
        self.assertEqual(OFFER, result.payload)
        self.assertEqual(1, mock_get.call_count)
        self.assertEqual("http://relay.test/api/proxy", mock_get.call_args.args[0])
        self.assertEqual(
            {"url": SOURCE.url, "bookmaker": "MaxBet"},
            mock_get.call_args.kwargs["params"],
        )
        self.assertEqual(2.0, mock_get.call_args.kwargs["timeout"])

    def test_wrapped_relay_contents_are_parsed(self) -> None:
        with patch(
            "app.ingestion.relay_client.requests.get",
            side_effect=[
                _FakeResponse(500, {"error": "Failed to fetch data"}),
                _FakeResponse(200, {"contents": json.dumps(OFFER)}),
            ],
        ) as mock_get:
            result = _fetcher().fetch(SOURCE)

        self.assertEqual("allorigins", result.strategy)
        self.assertEqual(OFFER, result.payload)
        relay_url = mock_get.call_args_list[1].args[0]
        self.assertEqual(
            "https://api.allorigins.win/get?url=https%3A%2F%2Fmaxbet.rs%2Frestapi%2Foffer%2Fen%2Finit",
            relay_url,
        )

    def test_garbled_responses_advance_to_next_relay(self) -> None:
        with patch(
            "app.ingestion.relay_client.requests.get",
            side_effect=[
                requests.ConnectionError("connection refused"),
                _FakeResponse(200, {"contents": "<html>rate limited</html>"}),
                _FakeResponse(200, _NOT_JSON, text="<html>"),
                _FakeResponse(200, OFFER),
            ],
        ) as mock_get:
            result = _fetcher().fetch(SOURCE)

        self.assertEqual("codetabs", result.strategy)
        self.assertEqual(4, mock_get.call_count)
        self.assertEqual(
            "https://api.codetabs.com/v1/proxy?quest=" + SOURCE.url,
            mock_get.call_args.args[0],
        )
        self.assertEqual("XMLHttpRequest", mock_get.call_args.kwargs["headers"]["X-Requested-With"])

    def test_exhausted_chain_raises_fetch_failed(self) -> None:
        with patch(
            "app.ingestion.relay_client.requests.get",
            side_effect=[
                requests.Timeout("read timeout"),
                _FakeResponse(200, ["no", "contents"]),
                _FakeResponse(403, {"error": "forbidden"}),
                _FakeResponse(502, _NOT_JSON, text="Bad Gateway"),
            ],
        ):
            with self.assertRaises(FetchFailed) as ctx:
                _fetcher().fetch(SOURCE)

        failures = ctx.exception.failures
        self.assertEqual(
            ["local-relay", "allorigins", "cors-anywhere", "codetabs"],
            [name for name, _ in failures],
        )
        self.assertIn("HTTP 403", failures[2][1])
        self.assertIn("MaxBet", str(ctx.exception))


class FetchUpstreamTests(unittest.TestCase):
    def test_sends_browser_headers(self) -> None:
        with patch(
            "app.ingestion.relay_client.requests.get",
            return_value=_FakeResponse(200, OFFER),
        ) as mock_get:
            payload = fetch_upstream(SOURCE.url, 5.0)

        self.assertEqual(OFFER, payload)
        headers = mock_get.call_args.kwargs["headers"]
        self.assertEqual("application/json", headers["Accept"])
        self.assertIn("Mozilla/5.0", headers["User-Agent"])

    def test_non_success_status_raises(self) -> None:
        with patch(
            "app.ingestion.relay_client.requests.get",
            return_value=_FakeResponse(503, _NOT_JSON, text="unavailable"),
        ):
            with self.assertRaises(StrategyError):
                fetch_upstream(SOURCE.url, 5.0)


if __name__ == "__main__":
    unittest.main()
