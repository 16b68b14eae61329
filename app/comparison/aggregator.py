"""Group bookmaker records by fixture and pick the best price per outcome."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, NamedTuple

from app.ingestion.schema import OUTCOMES, CanonicalMatch, Outcome


@dataclass(frozen=True)
class BestPrice:
    price: float | None = None
    source_id: str | None = None


@dataclass(frozen=True)
class BestOddsRow:
    home: BestPrice = field(default_factory=BestPrice)
    draw: BestPrice = field(default_factory=BestPrice)
    away: BestPrice = field(default_factory=BestPrice)

    def for_outcome(self, outcome: Outcome) -> BestPrice:
        return getattr(self, outcome)


@dataclass(frozen=True)
class MatchGroup:
    match_key: str
    records: tuple[CanonicalMatch, ...]

    @property
    def reference(self) -> CanonicalMatch:
        """First-seen record; its names, league and kickoff represent the group."""
        return self.records[0]

    @property
    def bookmaker_count(self) -> int:
        return len(self.records)


class ComparisonRow(NamedTuple):
    group: MatchGroup
    best: BestOddsRow


@dataclass(frozen=True)
class ComparisonStats:
    total_matches: int = 0
    active_bookmakers: int = 0
    leagues: int = 0


def group_by_match_key(records: Iterable[CanonicalMatch]) -> list[MatchGroup]:
    grouped: dict[str, list[CanonicalMatch]] = {}
    for record in records:
        grouped.setdefault(record.match_key, []).append(record)
    return [MatchGroup(match_key=key, records=tuple(items)) for key, items in grouped.items()]


def find_best_odds(records: Iterable[CanonicalMatch]) -> BestOddsRow:
    """Highest present price per outcome; the earliest record wins ties."""

    best: dict[str, BestPrice] = {outcome: BestPrice() for outcome in OUTCOMES}
    for record in records:
        for outcome in OUTCOMES:
            price = record.odds.price(outcome)
            if price is None:
                continue
            current = best[outcome].price
            if current is None or price > current:
                best[outcome] = BestPrice(price=price, source_id=record.source_id)
    return BestOddsRow(**best)


def is_best_price(record: CanonicalMatch, best: BestOddsRow, outcome: Outcome) -> bool:
    price = record.odds.price(outcome)
    return price is not None and price == best.for_outcome(outcome).price


def _kickoff_sort_key(group: MatchGroup) -> tuple[int, float]:
    kickoff: datetime | None = group.reference.kickoff
    if kickoff is None:
        return (0, 0.0)
    if kickoff.tzinfo is None:
        kickoff = kickoff.replace(tzinfo=timezone.utc)
    return (1, kickoff.timestamp())


def aggregate(records: Iterable[CanonicalMatch]) -> list[ComparisonRow]:
    """Group records into fixtures ordered by kickoff, each with its best odds.

    Groups without a kickoff come first; equal kickoffs keep the order in
    which their first record was seen.
    """

    groups = sorted(group_by_match_key(records), key=_kickoff_sort_key)
    return [ComparisonRow(group=group, best=find_best_odds(group.records)) for group in groups]


def summarize(records: Iterable[CanonicalMatch]) -> ComparisonStats:
    items = list(records)
    return ComparisonStats(
        total_matches=len(items),
        active_bookmakers=len({record.source_id for record in items}),
        leagues=len({record.league for record in items}),
    )
