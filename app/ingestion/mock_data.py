"""Fixed offer records for exercising the comparison without live sources."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from app.ingestion.schema import CanonicalMatch, OddsTriple

# (offset hours, event id, source, home, away, league, (home, draw, away))
_MOCK_ROWS: tuple[tuple[int, str, str, str, str, str, tuple[float, float, float]], ...] = (
    (0, "12345", "MaxBet", "Manchester United", "Liverpool", "Premier League", (2.10, 3.40, 3.20)),
    (0, "12345b", "Oktagon", "Manchester United", "Liverpool", "Premier League", (2.05, 3.50, 3.25)),
    (0, "12345c", "Betole", "Manchester United", "Liverpool", "Premier League", (2.15, 3.30, 3.15)),
    (2, "12346", "MaxBet", "Real Madrid", "Barcelona", "La Liga", (2.80, 3.10, 2.60)),
    (2, "12346b", "MerkurXTip", "Real Madrid", "Barcelona", "La Liga", (2.75, 3.20, 2.65)),
    (4, "12347", "MerkurXTip", "Bayern Munich", "Borussia Dortmund", "Bundesliga", (1.85, 3.60, 4.20)),
    (6, "12348a", "MaxBet", "Herediano", "Liberia", "Costa Rica Liga", (1.95, 3.20, 3.80)),
    (6, "12348b", "Oktagon", "Herediano", "M.Liberia", "Costa Rica Liga", (2.00, 3.15, 3.75)),
    (6, "12348c", "Betole", "CS Herediano", "Liberia", "Costa Rica Liga", (1.90, 3.25, 3.85)),
)


def mock_matches(now: datetime | None = None) -> list[CanonicalMatch]:
    base_time = (now or datetime.now(timezone.utc)) + timedelta(hours=2)
    return [
        CanonicalMatch(
            source_id=source,
            source_event_id=event_id,
            home_team=home,
            away_team=away,
            league=league,
            kickoff=base_time + timedelta(hours=offset),
            odds=OddsTriple(home=prices[0], draw=prices[1], away=prices[2]),
        )
        for offset, event_id, source, home, away, league, prices in _MOCK_ROWS
    ]
