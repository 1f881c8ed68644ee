"""Thread-safe ring buffer for trigger dispatch outcomes."""

import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone

from trigger_proxy.domain.constants import EVENT_LOG_MAXLEN

TRIGGERED = "triggered"
FAILED = "failed"


@dataclass(frozen=True)
class DispatchRecord:
    """The outcome of a single trigger attempt."""

    job: str
    outcome: str  # "triggered" or "failed"
    status_code: int | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))
    detail: str | None = None


class DispatchLog:
    """Thread-safe ring buffer that stores the most recent dispatch outcomes."""

    def __init__(self, maxlen: int = EVENT_LOG_MAXLEN) -> None:
        self._buffer: deque[DispatchRecord] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def record(self, record: DispatchRecord) -> None:
        """Append an outcome to the ring buffer."""
        with self._lock:
            self._buffer.append(record)

    def get_recent(self, limit: int = 50) -> list[DispatchRecord]:
        """Return the most recent outcomes, newest first."""
        with self._lock:
            items = list(self._buffer)
        return list(reversed(items))[:limit]
