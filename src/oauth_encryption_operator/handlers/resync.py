"""Background resync and retry loop for the mirror reconciler.

kopf never retries ``@kopf.on.event`` handlers, and its timers and daemons put
a finalizer on the object they are attached to. The canonical secret belongs
to another controller, so periodic resyncs and retries of failed syncs run
from this thread instead, started and stopped with the operator.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable

import kopf

logger = logging.getLogger(__name__)


class ResyncScheduler:
    """Runs a reconcile callable every ``interval`` seconds and after failures.

    A failed run schedules a retry: ``kopf.TemporaryError`` after its own
    delay, any other error after ``error_delay``. Errors are reported by the
    reconcile callable itself; here they only decide when to run again.
    """

    def __init__(
        self,
        reconcile: Callable[[str], Any],
        interval: float,
        error_delay: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._reconcile = reconcile
        self.interval = interval
        self.error_delay = error_delay
        self._clock = clock
        self._lock = threading.Lock()
        self._wakeup = threading.Event()
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None
        self._last_run = clock()
        self._retry_at: float | None = None

    @property
    def retry_at(self) -> float | None:
        with self._lock:
            return self._retry_at

    def schedule_retry(self, delay: float) -> None:
        """Run again ``delay`` seconds from now, unless a sooner run is pending."""
        due = self._clock() + delay
        with self._lock:
            if self._retry_at is None or due < self._retry_at:
                self._retry_at = due
        self._wakeup.set()

    def run(self, trigger: str) -> None:
        """Reconcile once and schedule a retry if that fails."""
        try:
            self._reconcile(trigger)
        except kopf.TemporaryError as e:
            self.schedule_retry(self.error_delay if e.delay is None else e.delay)
        except Exception:
            self.schedule_retry(self.error_delay)

    def tick(self) -> float:
        """Run the next sync if it is due.

        Returns:
            Seconds until the next sync is due, 0 if one just ran
        """
        now = self._clock()
        with self._lock:
            next_resync = self._last_run + self.interval
            if self._retry_at is not None and self._retry_at < next_resync:
                due, trigger = self._retry_at, "retry"
            else:
                due, trigger = next_resync, "timer"
            if due > now:
                return due - now
            self._retry_at = None
            self._last_run = now
        self.run(trigger)
        return 0.0

    def _loop(self) -> None:
        while not self._stopped.is_set():
            wait = self.tick()
            if wait > 0:
                self._wakeup.wait(wait)
                self._wakeup.clear()

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stopped.clear()
        self._thread = threading.Thread(target=self._loop, name="encryption-config-resync", daemon=True)
        self._thread.start()
        logger.info("Started resync every %ss", self.interval)

    def stop(self) -> None:
        self._stopped.set()
        self._wakeup.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None
