"""Parser for bookmaker offer payloads."""

from __future__ import annotations

import logging
import math
import re
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from app.ingestion.schema import UNKNOWN_LEAGUE, CanonicalMatch, OddsTriple

logger = logging.getLogger(__name__)

EVENTS_KEY = "esMatches"
FOOTBALL_SPORT_CODE = "S"
FOOTBALL_SPORT_TOKENS = ("Football", "#S#")
# Outcome index used by the feeds' 1X2 price object.
ODDS_KEYS = {"home": "1", "draw": "2", "away": "3"}
_EPOCH_DIGITS_RE = re.compile(r"-?[0-9]{1,20}")


class ShapeError(ValueError):
    pass


def _safe_price(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(price) or price <= 0:
        return None
    return price


def _safe_name(value: Any) -> str | None:
    if value is None:
        return None
    name = str(value).strip()
    return name or None


def _parse_kickoff(value: Any) -> datetime | None:
    """Kickoffs arrive as epoch milliseconds; ISO strings are accepted too.

    The result is always UTC; anything unparseable or outside the datetime
    range is treated as an unknown kickoff.
    """

    if value is None or isinstance(value, bool) or value == "" or value == 0:
        return None
    if isinstance(value, str):
        cleaned = value.strip()
        if _EPOCH_DIGITS_RE.fullmatch(cleaned):
            try:
                value = int(cleaned)
            except ValueError:
                return None
        else:
            try:
                parsed = datetime.fromisoformat(cleaned.replace("Z", "+00:00"))
                if parsed.tzinfo is None:
                    parsed = parsed.replace(tzinfo=timezone.utc)
                return parsed.astimezone(timezone.utc)
            except (ValueError, OverflowError):
                return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    return None


def _parse_odds(raw_odds: Any) -> OddsTriple:
    if not isinstance(raw_odds, dict):
        return OddsTriple()
    return OddsTriple(
        **{outcome: _safe_price(raw_odds.get(key)) for outcome, key in ODDS_KEYS.items()}
    )


def is_football(entry: dict[str, Any], *, assume_untagged: bool = True) -> bool:
    """Classify an offer entry as football.

    An entry without any sport code is treated as football when
    ``assume_untagged`` is set, which is what these feeds do for untagged
    entries; it is not a general rule.
    """

    sport = entry.get("sport")
    if sport == FOOTBALL_SPORT_CODE:
        return True
    sport_token = entry.get("sportToken")
    if isinstance(sport_token, (str, list)) and any(
        marker in sport_token for marker in FOOTBALL_SPORT_TOKENS
    ):
        return True
    return assume_untagged and not sport


def _extract_entries(payload: Any) -> list[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        entries = payload.get(EVENTS_KEY)
        if isinstance(entries, list):
            return entries
        keys = ", ".join(sorted(str(key) for key in payload)) or "none"
        raise ShapeError(f"no {EVENTS_KEY} array in payload (keys: {keys})")
    raise ShapeError(f"unexpected payload type {type(payload).__name__}")


def parse_offer(
    payload: Any,
    source_id: str,
    *,
    assume_untagged_football: bool = True,
) -> list[CanonicalMatch]:
    """Parse one source's offer JSON into CanonicalMatch records.

    Never raises for malformed input: a payload of the wrong shape yields
    an empty list and a logged error.
    """

    try:
        entries = _extract_entries(payload)
    except ShapeError as exc:
        logger.error(
            "Unexpected payload shape from source=%s: %s",
            source_id,
            exc,
            extra={"source": source_id},
        )
        return []

    matches: list[CanonicalMatch] = []
    skipped_sport = 0
    dropped = 0

    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            dropped += 1
            continue

        if not is_football(entry, assume_untagged=assume_untagged_football):
            skipped_sport += 1
            logger.debug(
                "Skipping non-football entry source=%s id=%s sport=%s",
                source_id,
                entry.get("id"),
                entry.get("sport"),
            )
            continue

        home = _safe_name(entry.get("home"))
        away = _safe_name(entry.get("away"))
        if home is None or away is None:
            dropped += 1
            logger.debug(
                "Dropping entry without team names source=%s id=%s",
                source_id,
                entry.get("id"),
            )
            continue

        event_id = entry.get("id")
        source_event_id = str(event_id) if event_id not in (None, "") else f"{source_id}-{index}"

        try:
            matches.append(
                CanonicalMatch(
                    source_id=source_id,
                    source_event_id=source_event_id,
                    home_team=home,
                    away_team=away,
                    league=_safe_name(entry.get("leagueName")) or UNKNOWN_LEAGUE,
                    kickoff=_parse_kickoff(entry.get("kickOffTime")),
                    odds=_parse_odds(entry.get("odds")),
                )
            )
        except ValidationError:
            dropped += 1
            logger.warning(
                "Invalid entry source=%s id=%s",
                source_id,
                event_id,
                exc_info=True,
                extra={"source": source_id},
            )

    logger.info(
        "Extracted %s football matches from source=%s (skipped_sport=%s dropped=%s)",
        len(matches),
        source_id,
        skipped_sport,
        dropped,
        extra={"source": source_id},
    )
    return matches
