"""Background eviction of completed tasks.

Disabled unless SANDBOX_TASK_TTL_SECONDS is set; without it the store keeps
every task for the process lifetime.
"""

from __future__ import annotations

import logging
import threading
from datetime import timedelta

from sandbox_tasks.tasks.store import TaskStore

logger = logging.getLogger(__name__)


class RetentionSweeper:
    def __init__(self, store: TaskStore, *, ttl_seconds: float, interval_seconds: float) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._store = store
        self._ttl = timedelta(seconds=ttl_seconds)
        self._interval = interval_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> int:
        return self._store.evict_completed(self._ttl)

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="task-retention", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _loop(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self.run_once()
            except Exception:
                logger.exception("Task retention sweep failed")
