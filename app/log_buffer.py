"""In-memory circular log handler backing the diagnostics endpoint."""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone
from dataclasses import dataclass, asdict

from app.settings import get_settings

TARGET_LOGGERS = (
    "app.main",
    "app.ingestion.sync",
    "app.ingestion.relay_client",
    "app.ingestion.offer_parser",
)


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    level: str
    logger: str
    source: str | None
    message: str


class BufferHandler(logging.Handler):
    """Keeps the last *maxlen* records, tagged with the bookmaker they concern."""

    def __init__(self, maxlen: int = 200) -> None:
        super().__init__()
        self._buffer: deque[LogEntry] = deque(maxlen=maxlen)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = LogEntry(
                timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc)
                .strftime("%Y-%m-%d %H:%M:%S UTC"),
                level=record.levelname,
                logger=record.name,
                source=getattr(record, "source", None),
                message=self.format(record),
            )
            self._buffer.append(entry)
        except Exception:
            self.handleError(record)

    def entries(self, limit: int = 100, source: str | None = None) -> list[dict]:
        """Return the most recent *limit* entries (newest first)."""
        items = list(self._buffer)
        if source:
            wanted = source.strip().lower()
            items = [e for e in items if e.source and e.source.lower() == wanted]
        items = items[-limit:] if limit > 0 else []
        items.reverse()
        return [asdict(e) for e in items]


_handler: BufferHandler | None = None


def get_buffer_handler() -> BufferHandler:
    global _handler
    if _handler is None:
        _handler = BufferHandler(maxlen=get_settings().log_buffer_size)
        _handler.setFormatter(logging.Formatter("%(message)s"))
        _handler.setLevel(logging.INFO)
    return _handler


def install_buffer_handler() -> BufferHandler:
    handler = get_buffer_handler()
    for name in TARGET_LOGGERS:
        lg = logging.getLogger(name)
        if handler not in lg.handlers:
            lg.addHandler(handler)
        if lg.level == logging.NOTSET or lg.level > logging.INFO:
            lg.setLevel(logging.INFO)
    return handler
