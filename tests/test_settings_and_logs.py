from __future__ import annotations

import logging
import os
import unittest
from unittest.mock import patch

from app.log_buffer import BufferHandler
from app.settings import DEFAULT_LOG_BUFFER_SIZE, DEFAULT_RELAY_TIMEOUT_SECONDS, load_settings


class LoadSettingsTests(unittest.TestCase):
    def test_reads_environment(self) -> None:
        env = {
            "ODDS_LOCAL_RELAY_URL": "http://relay.internal/api/proxy",
            "ODDS_RELAY_TIMEOUT_SECONDS": "4.5",
            "ODDS_ASSUME_UNTAGGED_FOOTBALL": "false",
            "ODDS_SOURCES": "MaxBet, Betole,",
        }
        with patch.dict(os.environ, env, clear=False):
            settings = load_settings()

        self.assertEqual("http://relay.internal/api/proxy", settings.local_relay_url)
        self.assertEqual(4.5, settings.relay_timeout_seconds)
        self.assertFalse(settings.assume_untagged_football)
        self.assertEqual(("MaxBet", "Betole"), settings.source_names)

    def test_invalid_values_fall_back_to_defaults(self) -> None:
        env = {"ODDS_RELAY_TIMEOUT_SECONDS": "-1", "ODDS_ASSUME_UNTAGGED_FOOTBALL": "maybe"}
        with patch.dict(os.environ, env, clear=False):
            settings = load_settings()

        self.assertEqual(DEFAULT_RELAY_TIMEOUT_SECONDS, settings.relay_timeout_seconds)
        self.assertTrue(settings.assume_untagged_football)

    def test_log_buffer_size_must_be_a_positive_integer(self) -> None:
        for raw in ("0.5", "0", "-3", "lots"):
            with self.subTest(raw=raw), patch.dict(os.environ, {"ODDS_LOG_BUFFER_SIZE": raw}):
                self.assertEqual(DEFAULT_LOG_BUFFER_SIZE, load_settings().log_buffer_size)

        with patch.dict(os.environ, {"ODDS_LOG_BUFFER_SIZE": "50"}):
            self.assertEqual(50, load_settings().log_buffer_size)


class BufferHandlerTests(unittest.TestCase):
    def test_entries_tagged_with_source_newest_first(self) -> None:
        handler = BufferHandler(maxlen=3)
        lg = logging.getLogger("tests.buffer")
        lg.propagate = False
        lg.setLevel(logging.INFO)
        lg.addHandler(handler)
        try:
            lg.info("first", extra={"source": "MaxBet"})
            lg.warning("second", extra={"source": "Betole"})
            lg.info("untagged")
            lg.error("third", extra={"source": "MaxBet"})
        finally:
            lg.removeHandler(handler)

        entries = handler.entries()
        self.assertEqual(["third", "untagged", "second"], [e["message"] for e in entries])
        self.assertEqual("ERROR", entries[0]["level"])
        self.assertEqual(["third"], [e["message"] for e in handler.entries(source="maxbet")])


if __name__ == "__main__":
    unittest.main()
