from __future__ import annotations

import logging
import threading
from datetime import timedelta
from typing import Optional

from companion.app.errors import AppError
from companion.session.session_manager import SessionManager

logger = logging.getLogger(__name__)


class SweepScheduler:
    """
    Runs SessionManager.sweep_inactive on a fixed interval in a daemon thread.
    The manager's store lock serializes each sweep against other mutations.
    """

    def __init__(
        self,
        manager: SessionManager,
        *,
        interval: timedelta = timedelta(hours=24),
        max_idle: timedelta = timedelta(days=30),
    ):
        self.manager = manager
        self.interval = interval
        self.max_idle = max_idle
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def run_once(self) -> int:
        try:
            return self.manager.sweep_inactive(self.max_idle)
        except AppError:
            # the next tick retries; a failed sweep must not kill the thread
            logger.error("Inactive session sweep failed", exc_info=True)
            return 0

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="session-sweeper", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _loop(self) -> None:
        while not self._stop.wait(self.interval.total_seconds()):
            self.run_once()
