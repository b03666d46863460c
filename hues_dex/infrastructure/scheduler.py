from __future__ import annotations

import logging
from threading import Event, Thread

from hues_dex.application.use_cases.initialize_system import InitializationService


logger = logging.getLogger(__name__)


class PeriodicDiscoveryRunner:
    """Calls the initialization service on a fixed interval from a daemon thread.

    An interval of 0 or less disables the runner.
    """

    def __init__(self, service: InitializationService, *, interval_seconds: float):
        self._service = service
        self._interval_seconds = interval_seconds
        self._stop = Event()
        self._thread: Thread | None = None

    @property
    def enabled(self) -> bool:
        return self._interval_seconds > 0

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if not self.enabled:
            logger.info("discovery_runner: disabled")
            return
        if self.is_alive():
            return
        self._stop.clear()
        self._thread = Thread(target=self._loop, name="periodic-discovery", daemon=True)
        self._thread.start()
        logger.info("discovery_runner: started interval_seconds=%s", self._interval_seconds)

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        logger.info("discovery_runner: stopped")

    def _loop(self) -> None:
        while not self._stop.is_set():
            try:
                result = self._service.run()
                logger.info("discovery_runner: tick outcome=%s", result.outcome)
            except Exception:
                logger.exception("discovery_runner: tick_failed")
            self._stop.wait(self._interval_seconds)
