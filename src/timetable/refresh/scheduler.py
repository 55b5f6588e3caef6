"""
Refresh Scheduler

Runs the fetch -> normalize -> replace cycle once at startup and then on a
fixed interval in a background thread.

Cycle states:
    IDLE -> FETCHING -> NORMALIZING -> REPLACING -> IDLE
    any stage error -> FAILED -> IDLE

A failed cycle leaves the previously installed generation live.
"""

import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional
from zoneinfo import ZoneInfo

from ..database.store import CatalogStore
from ..errors import MalformedRecordError, StoreError, UpstreamError
from ..upstream.client import UpstreamClient
from ..upstream.normalizer import normalize_class_types, normalize_sessions

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = timedelta(hours=6)


class RefreshState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    NORMALIZING = "normalizing"
    REPLACING = "replacing"
    FAILED = "failed"


@dataclass(frozen=True)
class CycleResult:
    """Outcome of one refresh cycle."""
    started_at: datetime
    finished_at: datetime
    succeeded: bool
    sessions: int = 0
    class_types: int = 0
    failed_state: Optional[RefreshState] = None
    error: Optional[str] = None

    @property
    def duration(self) -> timedelta:
        return self.finished_at - self.started_at


class RefreshScheduler:
    """Keeps the catalog store in step with the upstream timetable."""

    def __init__(
        self,
        client: UpstreamClient,
        store: CatalogStore,
        reference_tz: ZoneInfo,
        interval: timedelta = DEFAULT_INTERVAL,
    ):
        if interval <= timedelta(0):
            raise ValueError("Refresh interval must be positive")
        self.client = client
        self.store = store
        self.reference_tz = reference_tz
        self.interval = interval
        self.last_result: Optional[CycleResult] = None
        self._state = RefreshState.IDLE
        self._cycle_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> RefreshState:
        """
        Stage of the cycle in flight, IDLE between cycles.

        FAILED is only held while a failing cycle records its result; the
        outcome stays readable afterwards as last_result.failed_state.
        """
        return self._state

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_cycle(self) -> CycleResult:
        """
        Fetch, normalize and install one generation.

        Cycles are serialized: a call made while another cycle is in flight
        waits for it to finish.

        Returns:
            The cycle outcome; stage errors are reported here, not raised
        """
        with self._cycle_lock:
            started_at = datetime.now(timezone.utc)
            logger.info("Refreshing classes")
            try:
                self._state = RefreshState.FETCHING
                raw_sessions, raw_types = self.client.fetch()

                self._state = RefreshState.NORMALIZING
                sessions = normalize_sessions(raw_sessions, self.reference_tz)
                class_types = normalize_class_types(raw_types)

                self._state = RefreshState.REPLACING
                self.store.replace_catalog(sessions, class_types)
            except (UpstreamError, MalformedRecordError, StoreError) as e:
                failed_state = self._state
                self._state = RefreshState.FAILED
                logger.error("Refresh failed while %s: %s", failed_state.value, e)
                result = CycleResult(
                    started_at=started_at,
                    finished_at=datetime.now(timezone.utc),
                    succeeded=False,
                    failed_state=failed_state,
                    error=str(e),
                )
            else:
                result = CycleResult(
                    started_at=started_at,
                    finished_at=datetime.now(timezone.utc),
                    succeeded=True,
                    sessions=len(sessions),
                    class_types=len(class_types),
                )
                logger.info(
                    "Refreshed %d classes and %d class types in %s",
                    result.sessions, result.class_types, result.duration,
                )
            finally:
                self._state = RefreshState.IDLE
            self.last_result = result
            return result

    def start(self) -> CycleResult:
        """
        Run one cycle synchronously, then keep refreshing in the background.

        Returns:
            The outcome of the initial cycle
        """
        if self.running:
            raise RuntimeError("Refresh scheduler is already running")
        self._stop_event.clear()
        first_run = time.monotonic()
        result = self.run_cycle()
        self._thread = threading.Thread(
            target=self._loop, args=(first_run,), name="timetable-refresh", daemon=True
        )
        self._thread.start()
        return result

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop scheduling cycles. An in-flight cycle is allowed to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Refresh thread still finishing its cycle")
            else:
                self._thread = None

    def _loop(self, last_run: float) -> None:
        interval = self.interval.total_seconds()
        next_run = last_run + interval
        while not self._stop_event.wait(max(0.0, next_run - time.monotonic())):
            try:
                self.run_cycle()
            except Exception:
                logger.exception("Unexpected error during refresh cycle")
            next_run += interval
            now = time.monotonic()
            if next_run < now:
                # Cycle overran the interval: run again straight away, then
                # keep the interval from there
                next_run = now
        logger.info("Refresh scheduler stopped")
