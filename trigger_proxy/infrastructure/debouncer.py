"""Debouncer that collapses bursts of events per job into a single callback."""

import itertools
import threading
from collections.abc import Callable
from dataclasses import dataclass

from trigger_proxy.domain.errors import ShuttingDownError
from trigger_proxy.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class _PendingTimer:
    generation: int
    timer: threading.Timer


class Debouncer:
    """Coalesce rapid events per key into a single callback after a quiet period.

    When `trigger(key)` is called, the callback is scheduled to run after
    `delay` seconds. If `trigger(key)` is called again before the timer
    fires, the timer is replaced and the full delay starts over. A steady
    stream of triggers closer together than `delay` therefore postpones the
    callback until a gap of at least `delay` occurs.

    Each registered timer carries a generation number. An expiring timer
    only runs the callback and removes its entry while it is still the
    registered generation, so a stale timer never removes a newer one.
    Callbacks that already started are counted so shutdown can wait for them.
    """

    def __init__(self, callback: Callable[[str], object], delay: float) -> None:
        self._callback = callback
        self._delay = delay
        self._timers: dict[str, _PendingTimer] = {}
        self._generations = itertools.count(1)
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._in_flight = 0
        self._closed = False

    def trigger(self, key: str) -> None:
        """Schedule (or reschedule) the callback for the given key.

        Raises ShuttingDownError once cancel_all() has been called.
        """
        with self._lock:
            if self._closed:
                raise ShuttingDownError("Debouncer is shut down")

            generation = next(self._generations)
            timer = threading.Timer(self._delay, self._fire, args=(key, generation))
            timer.daemon = True
            # Started before it is registered: _fire blocks on the lock until then
            timer.start()

            existing = self._timers.pop(key, None)
            if existing is not None:
                existing.timer.cancel()
                logger.info("Resetting timer for job %s", key)
            self._timers[key] = _PendingTimer(generation, timer)

        logger.info(
            "Created timer for job '%s' with quiet period of %s seconds", key, self._delay
        )

    def _fire(self, key: str, generation: int) -> None:
        """Execute the callback, then drop the entry if it is still ours."""
        with self._lock:
            if not self._is_current(key, generation):
                # Re-armed or cancelled between expiry and acquiring the lock
                logger.debug("Superseded timer skipped for job %s", key)
                return
            self._in_flight += 1

        logger.info("Quiet period exceeded for job %s", key)
        try:
            self._callback(key)
        except Exception:
            logger.exception("Trigger callback failed for job %s", key)
        finally:
            with self._lock:
                self._in_flight -= 1
                if self._is_current(key, generation):
                    del self._timers[key]
                    logger.debug("Deleted timer for job %s", key)
                self._idle.notify_all()

    def _is_current(self, key: str, generation: int) -> bool:
        pending = self._timers.get(key)
        return pending is not None and pending.generation == generation

    def cancel_all(self, wait: float | None = None) -> bool:
        """Cancel all pending timers and refuse new ones. Called during shutdown.

        With `wait`, block up to that many seconds for callbacks that already
        started. Returns False if some were still running when the wait ended.
        """
        with self._lock:
            self._closed = True
            for pending in self._timers.values():
                pending.timer.cancel()
            self._timers.clear()
            drained = True
            if wait is not None:
                drained = self._idle.wait_for(lambda: self._in_flight == 0, timeout=wait)
        logger.info("All debounce timers cancelled")
        if not drained:
            logger.warning("Shutdown continued with triggers still in flight")
        return drained

    @property
    def in_flight_count(self) -> int:
        """Return the number of callbacks currently running."""
        with self._lock:
            return self._in_flight

    @property
    def pending_count(self) -> int:
        """Return the number of keys with pending timers."""
        with self._lock:
            return len(self._timers)

    @property
    def pending_keys(self) -> list[str]:
        """Return the keys with pending timers, sorted."""
        with self._lock:
            return sorted(self._timers)
