"""Quick probe of one bookmaker's relay chain."""

from __future__ import annotations

import argparse
import logging

from app.ingestion.offer_parser import EVENTS_KEY, parse_offer
from app.ingestion.relay_client import FetchFailed, SourceFetcher
from app.ingestion.sources import SOURCES, RawSource, get_source


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Probe a bookmaker through the relay chain and print entry counts.",
    )
    parser.add_argument(
        "--source",
        type=str,
        default="MaxBet",
        help="Bookmaker name (e.g., MaxBet, Oktagon).",
    )
    return parser.parse_args(argv)


def _resolve_source(raw: str) -> RawSource:
    source = get_source(raw)
    if source is None:
        supported = ", ".join(item.name for item in SOURCES)
        raise SystemExit(f"Unsupported source: {raw}. Supported sources: {supported}")
    return source


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    args = _parse_args(argv)
    source = _resolve_source(args.source)

    try:
        result = SourceFetcher().fetch(source)
    except FetchFailed as exc:
        for strategy, message in exc.failures:
            logging.error("%s: %s", strategy, message)
        raise SystemExit(1)

    payload = result.payload
    entries = payload.get(EVENTS_KEY) if isinstance(payload, dict) else payload
    matches = parse_offer(payload, source.name)
    logging.info(
        "Fetched %s entries (%s football) from source=%s via %s",
        len(entries) if isinstance(entries, list) else 0,
        len(matches),
        source.name,
        result.strategy,
    )


if __name__ == "__main__":
    main()
