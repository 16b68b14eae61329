"""Team name normalization for cross-bookmaker matching."""

from __future__ import annotations

import re
from dataclasses import dataclass

# Only one prefix and one suffix are stripped; first match in list order wins.
PREFIX_RULES: tuple[str, ...] = (
    "cs ",
    "cf ",
    "fc ",
    "ac ",
    "sc ",
    "cd ",
    "ca ",
    "club ",
    "real ",
    "atletico ",
    "athletic ",
    "deportivo ",
    "sporting ",
    "union ",
    "asociacion ",
    "sociedad ",
    "club deportivo ",
    "futbol club ",
    "football club ",
    "soccer club ",
    "deportes ",
    "ad ",
    "ud ",
    "sd ",
)

SUFFIX_RULES: tuple[str, ...] = (
    " fc",
    " cf",
    " ac",
    " sc",
    " cd",
    " ca",
    " united",
    " utd",
    " city",
    " town",
    " rovers",
    " wanderers",
    " athletic",
    " atletico",
    " deportivo",
    " sporting",
    " club",
    " team",
    " football",
    " soccer",
    " futbol",
    " deportes",
)

# Applied in order; each rule sees the output of the previous ones.
SYNONYM_RULES: tuple[tuple[str, str], ...] = (
    ("manchester united", "manutd"),
    ("manchester city", "mancity"),
    ("real madrid", "realmadrid"),
    ("atletico madrid", "atleticomadrid"),
    ("bayern munich", "bayernmunich"),
    ("borussia dortmund", "borussiadortmund"),
    ("paris saint germain", "psg"),
    ("paris st germain", "psg"),
    ("tottenham hotspur", "tottenham"),
    ("west ham united", "westham"),
    ("newcastle united", "newcastle"),
    ("brighton hove albion", "brighton"),
    ("crystal palace", "crystalpalace"),
    # "M.Liberia" / "M Liberia" style short prefixes
    ("m.", ""),
    ("m ", ""),
    ("san jose", "sanjose"),
    ("santa fe", "santafe"),
    ("los angeles", "losangeles"),
    ("new york", "newyork"),
    ("las vegas", "lasvegas"),
)

MIN_TOKEN_LENGTH = 3

_WHITESPACE_RE = re.compile(r"\s+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
_DIGITS_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class TeamNameNormalizer:
    """Table-driven normalizer turning a free-text team name into a token.

    The rule tables are plain ordered data so alternative tables can be
    supplied for feeds with different naming habits.
    """

    prefixes: tuple[str, ...] = PREFIX_RULES
    suffixes: tuple[str, ...] = SUFFIX_RULES
    synonyms: tuple[tuple[str, str], ...] = SYNONYM_RULES
    min_length: int = MIN_TOKEN_LENGTH

    def _strip_prefix(self, value: str) -> str:
        for prefix in self.prefixes:
            if value.startswith(prefix):
                return value[len(prefix):]
        return value

    def _strip_suffix(self, value: str) -> str:
        for suffix in self.suffixes:
            if value.endswith(suffix):
                return value[: len(value) - len(suffix)]
        return value

    def _apply_synonyms(self, value: str) -> str:
        for source, replacement in self.synonyms:
            if source in value:
                value = value.replace(source, replacement, 1)
        return value

    def normalize(self, name: str) -> str:
        original = str(name or "")
        value = original.lower().strip()
        value = self._strip_prefix(value)
        value = self._strip_suffix(value)
        value = self._apply_synonyms(value)

        value = _WHITESPACE_RE.sub("", value)
        value = _NON_ALNUM_RE.sub("", value)
        value = _DIGITS_RE.sub("", value)

        if len(value) < self.min_length and len(original) > len(value):
            # Stripping went too far; keep the raw name (digits included).
            fallback = _WHITESPACE_RE.sub("", original.lower())
            return _NON_ALNUM_RE.sub("", fallback)
        return value


DEFAULT_NORMALIZER = TeamNameNormalizer()


def normalize_team_name(name: str) -> str:
    return DEFAULT_NORMALIZER.normalize(name)
