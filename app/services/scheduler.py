import logging
import threading
from typing import Optional

from app.services.rate_sync import RateSynchronizer

logger = logging.getLogger(__name__)


class SyncScheduler:
    """Runs the synchronizer right away and then every ``interval_seconds`` on a daemon thread."""

    def __init__(self, synchronizer: RateSynchronizer, interval_seconds: float):
        self._synchronizer = synchronizer
        self._interval = interval_seconds
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="rate-sync-scheduler", daemon=True)
        self._thread.start()
        logger.info("Exchange rate sync scheduled every %s seconds", self._interval)

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop_event.set()
        if self._thread is None:
            return
        self._thread.join(timeout)
        if self._thread.is_alive():
            # Still inside a sync run; the loop exits once the run finishes
            logger.warning("Exchange rate sync still running after %s seconds; scheduler stops when it finishes", timeout)
            return
        self._thread = None
        logger.info("Exchange rate sync scheduler stopped")

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            logger.info("Starting scheduled exchange rate synchronization")
            try:
                self._synchronizer.sync()
            except Exception:
                logger.exception("Scheduled exchange rate synchronization failed")
            self._stop_event.wait(self._interval)
