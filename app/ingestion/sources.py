"""Configured bookmaker sources and their offer endpoints."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RawSource:
    name: str
    url: str


SOURCES: tuple[RawSource, ...] = (
    RawSource("MaxBet", "https://maxbet.rs/restapi/offer/en/init"),
    RawSource("MerkurXTip", "https://www.merkurxtip.rs/restapi/offer/en/init"),
    RawSource("Oktagon", "https://oktagonbet.com/restapi/offer/en/init"),
    RawSource("Betole", "https://betole.com/restapi/offer/en/init"),
)

SOURCE_NAMES: dict[str, RawSource] = {source.name.upper(): source for source in SOURCES}


def get_source(name: str) -> RawSource | None:
    """Return the configured source for a name (case-insensitive).

    Returns None when the source is not configured.
    """

    return SOURCE_NAMES.get(name.strip().upper())


def select_sources(names: list[str] | None) -> list[RawSource]:
    if not names:
        return list(SOURCES)
    selected: list[RawSource] = []
    invalid: list[str] = []
    for name in names:
        source = get_source(name)
        if source is None:
            invalid.append(name)
        elif source not in selected:
            selected.append(source)
    if invalid:
        supported = ", ".join(item.name for item in SOURCES)
        raise ValueError(f"Unsupported sources: {', '.join(invalid)}. Supported: {supported}")
    return selected
