from datetime import datetime
from pydantic import BaseModel
from typing import Optional


class BestPriceOut(BaseModel):
    price: Optional[float]
    bookmaker: Optional[str]


class BestOddsOut(BaseModel):
    home: BestPriceOut
    draw: BestPriceOut
    away: BestPriceOut


class BookmakerOddsOut(BaseModel):
    bookmaker: str
    event_id: str
    home: Optional[float]
    draw: Optional[float]
    away: Optional[float]
    best_home: bool
    best_draw: bool
    best_away: bool


class MatchComparisonOut(BaseModel):
    home_team: str
    away_team: str
    league: str
    kickoff: Optional[datetime]
    bookmaker_count: int
    bookmakers: list[BookmakerOddsOut]
    best: BestOddsOut


class SourceOutcomeOut(BaseModel):
    source: str
    ok: bool
    strategy: Optional[str] = None
    records: int = 0
    error: Optional[str] = None


class StatsOut(BaseModel):
    total_matches: int
    active_bookmakers: int
    leagues: int


class MatchesResponse(BaseModel):
    matches: list[MatchComparisonOut]
    stats: StatsOut
    sources: list[SourceOutcomeOut]
    count: int
    mock: bool = False
    message: Optional[str] = None


class SourceOut(BaseModel):
    name: str
    url: str
