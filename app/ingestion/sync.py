"""Fetch every configured bookmaker concurrently and build the comparison."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Sequence

from app.comparison.aggregator import ComparisonRow, ComparisonStats, aggregate, summarize
from app.ingestion.mock_data import mock_matches
from app.ingestion.offer_parser import parse_offer
from app.ingestion.relay_client import FetchFailed, SourceFetcher
from app.ingestion.schema import CanonicalMatch
from app.ingestion.sources import RawSource
from app.settings import get_settings

logger = logging.getLogger(__name__)


@dataclass
class SourceOutcome:
    source: str
    ok: bool = False
    strategy: str | None = None
    records: int = 0
    error: str | None = None


@dataclass
class IngestReport:
    matches: list[CanonicalMatch] = field(default_factory=list)
    outcomes: list[SourceOutcome] = field(default_factory=list)

    @property
    def failed_sources(self) -> list[str]:
        return [outcome.source for outcome in self.outcomes if not outcome.ok]


@dataclass
class Comparison:
    rows: list[ComparisonRow]
    stats: ComparisonStats
    outcomes: list[SourceOutcome] = field(default_factory=list)
    mock: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.rows


async def _run_source_pipeline(
    fetcher: SourceFetcher,
    source: RawSource,
    assume_untagged_football: bool,
) -> tuple[SourceOutcome, list[CanonicalMatch]]:
    try:
        result = await asyncio.to_thread(fetcher.fetch, source)
    except FetchFailed as exc:
        return SourceOutcome(source=source.name, error=str(exc)), []

    matches = parse_offer(
        result.payload,
        source.name,
        assume_untagged_football=assume_untagged_football,
    )
    outcome = SourceOutcome(
        source=source.name,
        ok=True,
        strategy=result.strategy,
        records=len(matches),
    )
    return outcome, matches


async def run_ingestion(
    sources: Sequence[RawSource],
    fetcher: SourceFetcher | None = None,
    *,
    assume_untagged_football: bool | None = None,
) -> IngestReport:
    """Run one fetch-then-parse pipeline per source and wait for all of them.

    A failing source never cancels or fails the others; it just contributes
    no records.
    """

    fetcher = fetcher or SourceFetcher()
    if assume_untagged_football is None:
        assume_untagged_football = get_settings().assume_untagged_football

    results = await asyncio.gather(
        *(_run_source_pipeline(fetcher, source, assume_untagged_football) for source in sources),
        return_exceptions=True,
    )

    report = IngestReport()
    for source, result in zip(sources, results):
        if isinstance(result, BaseException):
            logger.error(
                "Pipeline crashed for source=%s",
                source.name,
                exc_info=result,
                extra={"source": source.name},
            )
            report.outcomes.append(
                SourceOutcome(source=source.name, error=f"{type(result).__name__}: {result}")
            )
            continue
        outcome, matches = result
        report.outcomes.append(outcome)
        report.matches.extend(matches)

    logger.info(
        "Ingestion done: sources=%s ok=%s failed=%s records=%s",
        len(report.outcomes),
        len(report.outcomes) - len(report.failed_sources),
        ",".join(report.failed_sources) or "none",
        len(report.matches),
    )
    return report


async def ingest_all(
    sources: Sequence[RawSource],
    fetcher: SourceFetcher | None = None,
) -> list[CanonicalMatch]:
    report = await run_ingestion(sources, fetcher)
    return report.matches


async def load_comparison(
    sources: Sequence[RawSource],
    *,
    use_mock: bool = False,
    fetcher: SourceFetcher | None = None,
) -> Comparison:
    """One full load cycle: ingest (or mock), aggregate, summarize.

    Nothing is kept between cycles, so overlapping calls cannot see each
    other's records.
    """

    if use_mock:
        records = mock_matches()
        logger.info("Loaded %s mock records", len(records))
        return Comparison(rows=aggregate(records), stats=summarize(records), mock=True)

    report = await run_ingestion(sources, fetcher)
    if not report.matches:
        logger.warning("No football matches found from %s sources", len(sources))
    return Comparison(
        rows=aggregate(report.matches),
        stats=summarize(report.matches),
        outcomes=report.outcomes,
    )
