"""Order-independent identity key for a fixture."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo

from app.matching.normalizer import normalize_team_name

UNKNOWN_DATE_TOKEN = "unknown"
KEY_TIMEZONE: tzinfo = timezone.utc


def kickoff_date_token(kickoff: datetime | None, tz: tzinfo = KEY_TIMEZONE) -> str:
    """Calendar date of the kickoff (YYYY-MM-DD in ``tz``) or ``unknown``."""

    if kickoff is None:
        return UNKNOWN_DATE_TOKEN
    if kickoff.tzinfo is None:
        kickoff = kickoff.replace(tzinfo=timezone.utc)
    try:
        return kickoff.astimezone(tz).date().isoformat()
    except OverflowError:
        # Shifting a kickoff at the edge of the datetime range can overflow.
        return UNKNOWN_DATE_TOKEN


def build_match_key(home_team: str, away_team: str, kickoff: datetime | None) -> str:
    """Build ``{low}_vs_{high}_{date}`` from two team names and a kickoff.

    Team tokens are sorted so sources that disagree on home/away labeling
    still produce the same key. Only the date of the kickoff is used, so a
    few minutes of disagreement on start time does not split a fixture.
    """

    low, high = sorted((normalize_team_name(home_team), normalize_team_name(away_team)))
    return f"{low}_vs_{high}_{kickoff_date_token(kickoff)}"
