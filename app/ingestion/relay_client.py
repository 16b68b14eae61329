"""HTTP fetch chain for bookmaker offer endpoints.

Browsers (and some hosts) cannot reach the bookmaker APIs directly, so each
source is fetched through an ordered list of relays. The first relay that
answers with a 2xx status and parseable JSON wins; any other outcome moves
on to the next relay without retrying.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import requests

from app.ingestion.sources import RawSource
from app.settings import get_settings

logger = logging.getLogger(__name__)
MAX_ERROR_SNIPPET = 300
BROWSER_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
JSON_HEADERS = {"Accept": "application/json"}
XHR_HEADERS = {"Accept": "application/json", "X-Requested-With": "XMLHttpRequest"}


class StrategyError(RuntimeError):
    pass


class FetchFailed(RuntimeError):
    def __init__(self, source_name: str, failures: list[tuple[str, str]]):
        self.source_name = source_name
        self.failures = failures
        summary = "; ".join(f"{name}: {message}" for name, message in failures)
        super().__init__(
            f"All fetch strategies failed for {source_name}: {summary or 'no strategies configured'}"
        )


def _truncate(value: str, limit: int = MAX_ERROR_SNIPPET) -> str:
    if len(value) <= limit:
        return value
    return value[:limit] + "...<truncated>"


def _get_json(
    url: str,
    *,
    timeout: float,
    headers: dict[str, str] | None = None,
    params: dict[str, str] | None = None,
) -> Any:
    try:
        response = requests.get(url, params=params, headers=headers, timeout=timeout)
    except requests.RequestException as exc:
        raise StrategyError(f"request failed: {exc}") from exc

    if not 200 <= response.status_code < 300:
        raise StrategyError(f"HTTP {response.status_code}: {_truncate(response.text)}")
    try:
        return response.json()
    except ValueError as exc:
        raise StrategyError("non-JSON response: " + _truncate(response.text)) from exc


def fetch_upstream(url: str, timeout: float) -> Any:
    """Fetch a bookmaker endpoint directly, the way the local relay does."""

    headers = {**JSON_HEADERS, "User-Agent": BROWSER_USER_AGENT}
    return _get_json(url, timeout=timeout, headers=headers)


class FetchStrategy(ABC):
    """One way of reaching a source. Raises StrategyError on any failure."""

    name: str

    @abstractmethod
    def fetch(self, source: RawSource, timeout: float) -> Any:
        ...


class LocalRelayStrategy(FetchStrategy):
    name = "local-relay"

    def __init__(self, relay_url: str):
        self.relay_url = relay_url

    def fetch(self, source: RawSource, timeout: float) -> Any:
        return _get_json(
            self.relay_url,
            timeout=timeout,
            headers=JSON_HEADERS,
            params={"url": source.url, "bookmaker": source.name},
        )


class WrappedContentsRelay(FetchStrategy):
    """Relay answering ``{"contents": "<upstream body as text>"}``."""

    def __init__(self, name: str, base_url: str):
        self.name = name
        self.base_url = base_url

    def fetch(self, source: RawSource, timeout: float) -> Any:
        wrapped = _get_json(
            self.base_url + quote(source.url, safe="!*'()"),
            timeout=timeout,
            headers=JSON_HEADERS,
        )
        contents = wrapped.get("contents") if isinstance(wrapped, dict) else None
        if not isinstance(contents, str):
            raise StrategyError("relay response has no contents field")
        try:
            return json.loads(contents)
        except json.JSONDecodeError as exc:
            raise StrategyError("relay contents were not valid JSON: " + _truncate(contents)) from exc


class PassThroughRelay(FetchStrategy):
    """Relay that takes the raw target URL appended and returns the body as-is."""

    def __init__(self, name: str, base_url: str, headers: dict[str, str] | None = None):
        self.name = name
        self.base_url = base_url
        self.headers = headers or JSON_HEADERS

    def fetch(self, source: RawSource, timeout: float) -> Any:
        return _get_json(self.base_url + source.url, timeout=timeout, headers=self.headers)


EXTERNAL_RELAYS: tuple[FetchStrategy, ...] = (
    WrappedContentsRelay("allorigins", "https://api.allorigins.win/get?url="),
    PassThroughRelay("cors-anywhere", "https://cors-anywhere.herokuapp.com/", XHR_HEADERS),
    PassThroughRelay("codetabs", "https://api.codetabs.com/v1/proxy?quest=", XHR_HEADERS),
)


def default_strategies(local_relay_url: str | None = None) -> list[FetchStrategy]:
    relay_url = local_relay_url or get_settings().local_relay_url
    return [LocalRelayStrategy(relay_url), *EXTERNAL_RELAYS]


@dataclass(frozen=True)
class FetchResult:
    source: str
    strategy: str
    payload: Any


class SourceFetcher:
    """Walks the strategy chain for one source at a time."""

    def __init__(
        self,
        strategies: list[FetchStrategy] | None = None,
        timeout: float | None = None,
    ):
        self.strategies = list(strategies) if strategies is not None else default_strategies()
        self.timeout = timeout if timeout is not None else get_settings().relay_timeout_seconds

    def fetch(self, source: RawSource) -> FetchResult:
        failures: list[tuple[str, str]] = []
        for strategy in self.strategies:
            logger.info("Fetching source=%s via %s", source.name, strategy.name)
            try:
                payload = strategy.fetch(source, self.timeout)
            except StrategyError as exc:
                failures.append((strategy.name, str(exc)))
                logger.warning(
                    "Strategy %s failed for source=%s: %s",
                    strategy.name,
                    source.name,
                    exc,
                    extra={"source": source.name},
                )
                continue

            logger.info(
                "Fetched source=%s via %s",
                source.name,
                strategy.name,
                extra={"source": source.name},
            )
            return FetchResult(source=source.name, strategy=strategy.name, payload=payload)

        logger.error(
            "All %s fetch strategies failed for source=%s",
            len(self.strategies),
            source.name,
            extra={"source": source.name},
        )
        raise FetchFailed(source.name, failures)
