from __future__ import annotations

import unittest
from unittest.mock import patch

import requests

from app.ingestion import probe


class _FakeResponse:
    def __init__(self, status_code: int, payload):
        self.status_code = status_code
        self._payload = payload
        self.text = str(payload)

    def json(self):
        return self._payload


OFFER = {
    "esMatches": [
        {"id": 1, "home": "Herediano", "away": "Liberia", "sport": "S"},
        {"id": 2, "home": "Lakers", "away": "Celtics", "sport": "B"},
    ]
}


class SourceCheckCliTests(unittest.TestCase):
    def test_reports_entry_counts_and_strategy(self) -> None:
        with patch(
            "app.ingestion.relay_client.requests.get",
            return_value=_FakeResponse(200, OFFER),
        ), self.assertLogs(level="INFO") as logs:
            probe.main(["--source", "oktagon"])

        output = "\n".join(logs.output)
        self.assertIn("Fetched 2 entries (1 football) from source=Oktagon via local-relay", output)

    def test_exits_non_zero_when_every_strategy_fails(self) -> None:
        with patch(
            "app.ingestion.relay_client.requests.get",
            side_effect=requests.ConnectionError("connection refused"),
        ) as mock_get, self.assertLogs(level="ERROR") as logs:
            with self.assertRaises(SystemExit) as ctx:
                probe.main(["--source", "MaxBet"])

        self.assertEqual(1, ctx.exception.code)
        self.assertEqual(4, mock_get.call_count)
        failures = [line for line in logs.output if line.startswith("ERROR:root:")]
        self.assertEqual(4, len(failures))
        self.assertTrue(failures[0].startswith("ERROR:root:local-relay: "))

    def test_unknown_source_exits(self) -> None:
        with patch("app.ingestion.relay_client.requests.get") as mock_get:
            with self.assertRaises(SystemExit) as ctx:
                probe.main(["--source", "NoSuchBook"])

        self.assertIn("Unsupported source: NoSuchBook", str(ctx.exception))
        mock_get.assert_not_called()


if __name__ == "__main__":
    unittest.main()
