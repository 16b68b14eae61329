from __future__ import annotations

import unittest

from app.ingestion.run import main


class RunCliTests(unittest.TestCase):
    def test_mock_run_logs_best_odds_per_match(self) -> None:
        with self.assertLogs(level="INFO") as logs:
            main(["--mock"])

        output = "\n".join(logs.output)
        self.assertIn("Manchester United vs Liverpool [Premier League]", output)
        self.assertIn("1 2.15 (Betole)", output)
        self.assertIn("books=3", output)

    def test_unknown_source_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            main(["--sources", "NoSuchBook"])

        self.assertIn("Unsupported sources: NoSuchBook", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
