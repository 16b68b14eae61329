"""CLI entrypoint for a single odds comparison run."""

from __future__ import annotations

import argparse
import asyncio
import logging

from app.comparison.aggregator import ComparisonRow
from app.ingestion.sources import RawSource, select_sources
from app.ingestion.sync import load_comparison
from app.settings import get_settings


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch bookmaker offers and print the best 1X2 odds per match.",
    )
    parser.add_argument(
        "--sources",
        type=str,
        default="",
        help="Comma-separated list of bookmakers (e.g., MaxBet,Oktagon). Defaults to all.",
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use built-in mock offers instead of live sources.",
    )
    return parser.parse_args(argv)


def _parse_sources(raw: str) -> list[RawSource]:
    names = [name.strip() for name in raw.split(",") if name.strip()]
    if not names:
        names = list(get_settings().source_names)
    try:
        return select_sources(names)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc


def _format_price(price: float | None) -> str:
    return f"{price:.2f}" if price is not None else "N/A"


def format_row(row: ComparisonRow) -> str:
    reference = row.group.reference
    kickoff = reference.kickoff.isoformat() if reference.kickoff else "Time TBD"
    best = row.best
    outcomes = " | ".join(
        f"{label} {_format_price(price.price)} ({price.source_id or '-'})"
        for label, price in (("1", best.home), ("X", best.draw), ("2", best.away))
    )
    return (
        f"{reference.home_team} vs {reference.away_team} [{reference.league}] {kickoff} "
        f"books={row.group.bookmaker_count} :: {outcomes}"
    )


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    args = _parse_args(argv)
    sources = _parse_sources(args.sources)

    logging.info(
        "Starting comparison sources=%s mock=%s",
        ",".join(source.name for source in sources),
        args.mock,
    )
    comparison = asyncio.run(load_comparison(sources, use_mock=args.mock))

    if comparison.is_empty:
        logging.warning("No football matches found")
        return
    for row in comparison.rows:
        logging.info("%s", format_row(row))
    logging.info(
        "Done: matches=%s bookmakers=%s leagues=%s groups=%s",
        comparison.stats.total_matches,
        comparison.stats.active_bookmakers,
        comparison.stats.leagues,
        len(comparison.rows),
    )


if __name__ == "__main__":
    main()
