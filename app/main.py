from __future__ import annotations

from datetime import datetime, timezone
import asyncio
import logging
from urllib.parse import urlparse

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from app.comparison.aggregator import ComparisonRow, is_best_price
from app.ingestion.relay_client import StrategyError, fetch_upstream
from app.ingestion.sources import SOURCES, RawSource, select_sources
from app.ingestion.sync import Comparison, load_comparison
from app.log_buffer import get_buffer_handler, install_buffer_handler
from app.schemas import (
    BestOddsOut,
    BestPriceOut,
    BookmakerOddsOut,
    MatchComparisonOut,
    MatchesResponse,
    SourceOut,
    SourceOutcomeOut,
    StatsOut,
)
from app.settings import get_settings

app = FastAPI(title="Football Odds Comparison")
logger = logging.getLogger(__name__)
NO_MATCHES_MESSAGE = "No football matches found"


def _configured_sources() -> list[RawSource]:
    names = list(get_settings().source_names)
    try:
        return select_sources(names)
    except ValueError as exc:
        logger.error("Ignoring ODDS_SOURCES: %s", exc)
        return list(SOURCES)


@app.on_event("startup")
async def install_diagnostics() -> None:
    install_buffer_handler()
    logger.info(
        "App starting up with sources=%s",
        ",".join(source.name for source in _configured_sources()),
    )


@app.get("/health")
def health():
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/api/proxy")
async def api_proxy(url: str | None = None, bookmaker: str | None = None):
    label = bookmaker or "Unknown"
    if not url:
        return JSONResponse(status_code=400, content={"error": "URL parameter is required"})
    if urlparse(url).scheme not in {"http", "https"}:
        return JSONResponse(status_code=400, content={"error": "URL must be http or https"})

    logger.info("Relaying request for bookmaker=%s", label, extra={"source": label})
    try:
        payload = await asyncio.to_thread(
            fetch_upstream, url, get_settings().relay_timeout_seconds
        )
    except StrategyError as exc:
        logger.error("Relay failed for bookmaker=%s: %s", label, exc, extra={"source": label})
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to fetch data",
                "message": str(exc),
                "bookmaker": label,
            },
        )
    return JSONResponse(content=payload)


@app.get("/api/sources", response_model=list[SourceOut])
def api_sources():
    return [SourceOut(name=source.name, url=source.url) for source in _configured_sources()]


@app.get("/api/matches", response_model=MatchesResponse)
async def api_matches(mock: bool = False):
    comparison = await load_comparison(_configured_sources(), use_mock=mock)
    return _comparison_response(comparison)


@app.get("/api/logs")
def api_logs(limit: int = 100, source: str | None = None):
    handler = get_buffer_handler()
    return {"entries": handler.entries(limit=limit, source=source)}


def _row_out(row: ComparisonRow) -> MatchComparisonOut:
    reference = row.group.reference
    best = row.best
    return MatchComparisonOut(
        home_team=reference.home_team,
        away_team=reference.away_team,
        league=reference.league,
        kickoff=reference.kickoff,
        bookmaker_count=row.group.bookmaker_count,
        bookmakers=[
            BookmakerOddsOut(
                bookmaker=record.source_id,
                event_id=record.source_event_id,
                home=record.odds.home,
                draw=record.odds.draw,
                away=record.odds.away,
                best_home=is_best_price(record, best, "home"),
                best_draw=is_best_price(record, best, "draw"),
                best_away=is_best_price(record, best, "away"),
            )
            for record in row.group.records
        ],
        best=BestOddsOut(
            home=BestPriceOut(price=best.home.price, bookmaker=best.home.source_id),
            draw=BestPriceOut(price=best.draw.price, bookmaker=best.draw.source_id),
            away=BestPriceOut(price=best.away.price, bookmaker=best.away.source_id),
        ),
    )


def _comparison_response(comparison: Comparison) -> MatchesResponse:
    stats = comparison.stats
    return MatchesResponse(
        matches=[_row_out(row) for row in comparison.rows],
        stats=StatsOut(
            total_matches=stats.total_matches,
            active_bookmakers=stats.active_bookmakers,
            leagues=stats.leagues,
        ),
        sources=[
            SourceOutcomeOut(
                source=outcome.source,
                ok=outcome.ok,
                strategy=outcome.strategy,
                records=outcome.records,
                error=outcome.error,
            )
            for outcome in comparison.outcomes
        ],
        count=len(comparison.rows),
        mock=comparison.mock,
        message=NO_MATCHES_MESSAGE if comparison.is_empty else None,
    )
