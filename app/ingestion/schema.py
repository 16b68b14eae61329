"""Internal data contract for bookmaker offer ingestion."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.matching.match_key import build_match_key

UNKNOWN_LEAGUE = "Unknown League"

Outcome = Literal["home", "draw", "away"]
OUTCOMES: tuple[Outcome, ...] = ("home", "draw", "away")


class OddsTriple(BaseModel):
    """1X2 prices. ``None`` means the bookmaker quoted no price."""

    model_config = ConfigDict(frozen=True)

    home: Optional[float] = Field(default=None, gt=0)
    draw: Optional[float] = Field(default=None, gt=0)
    away: Optional[float] = Field(default=None, gt=0)

    def price(self, outcome: Outcome) -> Optional[float]:
        return getattr(self, outcome)


class CanonicalMatch(BaseModel):
    """
    One bookmaker's report of one fixture, as used across fetch -> parse -> aggregate.
    """

    model_config = ConfigDict(frozen=True)

    # Required fields
    source_id: str
    source_event_id: str
    home_team: str = Field(min_length=1)
    away_team: str = Field(min_length=1)

    # Optional fields
    league: str = UNKNOWN_LEAGUE
    kickoff: Optional[datetime] = None
    odds: OddsTriple = OddsTriple()

    @property
    def match_key(self) -> str:
        # Derived on access so it can never disagree with the names/kickoff.
        return build_match_key(self.home_team, self.away_team, self.kickoff)
