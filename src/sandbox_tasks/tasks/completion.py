"""Background completion of simulated sandbox tasks.

Every scheduled task gets its own daemon thread that waits for a randomly
picked delay and then commits the task's final state through a callback. The
wait happens without holding any store lock; only the commit callback takes
the store's write lock.

Handles are kept so tests can trigger or await a completion deterministically
and so shutdown can cancel completions that have not started committing.
"""

from __future__ import annotations

import logging
import random
import threading
from collections.abc import Callable

from sandbox_tasks.tasks.models import PLACEHOLDER_RESULT

logger = logging.getLogger(__name__)

DelayPicker = Callable[[], float]
CommitFn = Callable[[str, str], object]

DEFAULT_MIN_DELAY_SECONDS = 2
DEFAULT_MAX_DELAY_SECONDS = 4


def random_delay(
    min_seconds: int = DEFAULT_MIN_DELAY_SECONDS,
    max_seconds: int = DEFAULT_MAX_DELAY_SECONDS,
    *,
    rng: random.Random | None = None,
) -> DelayPicker:
    """Return a picker drawing whole seconds uniformly from ``[min, max]``."""

    if min_seconds < 0 or max_seconds < min_seconds:
        raise ValueError(f"Invalid delay range: {min_seconds}..{max_seconds}")
    source = rng or random.Random()

    def pick() -> float:
        return float(source.randint(min_seconds, max_seconds))

    return pick


def fixed_delay(seconds: float) -> DelayPicker:
    if seconds < 0:
        raise ValueError(f"Delay must be non-negative, got {seconds}")
    return lambda: seconds


class CompletionHandle:
    """Control over one pending task completion."""

    def __init__(
        self,
        *,
        task_id: str,
        delay: float,
        result: str,
        commit: CommitFn,
        on_finish: Callable[[CompletionHandle], None] | None = None,
    ) -> None:
        self.task_id = task_id
        self.delay = delay
        self._result = result
        self._commit = commit
        self._on_finish = on_finish

        self._wake = threading.Event()
        self._done = threading.Event()
        self._state_lock = threading.Lock()
        self._committing = False
        self._cancelled = False

        self._thread = threading.Thread(
            target=self._run,
            name=f"complete-task-{task_id}",
            daemon=True,
        )

    @property
    def done(self) -> bool:
        return self._done.is_set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> None:
        self._thread.start()

    def trigger(self) -> None:
        """Commit now instead of waiting out the rest of the delay."""
        self._wake.set()

    def cancel(self) -> bool:
        """Prevent the commit. Returns False once the commit has started."""
        with self._state_lock:
            if self._committing or self._done.is_set():
                return False
            self._cancelled = True
        self._wake.set()
        return True

    def wait(self, timeout: float | None = None) -> bool:
        return self._done.wait(timeout)

    def _run(self) -> None:
        try:
            self._wake.wait(self.delay)
            with self._state_lock:
                if self._cancelled:
                    logger.debug("Task completion cancelled", extra={"task_id": self.task_id})
                    return
                self._committing = True
            self._commit(self.task_id, self._result)
        except Exception:
            logger.exception("Task completion failed", extra={"task_id": self.task_id})
        finally:
            if self._on_finish is not None:
                self._on_finish(self)
            self._done.set()


class CompletionScheduler:
    """Starts one completion thread per task.

    ``delay_picker`` defaults to the 2-4 second range; tests inject
    :func:`fixed_delay` to control timing. Only completions that have not
    finished are tracked: a handle is forgotten as soon as it commits or is
    cancelled.
    """

    def __init__(
        self,
        delay_picker: DelayPicker | None = None,
        *,
        result: str = PLACEHOLDER_RESULT,
    ) -> None:
        if not result:
            raise ValueError("Completion result must be a non-empty string")
        self._delay_picker = delay_picker if delay_picker is not None else random_delay()
        self._result = result
        self._lock = threading.Lock()
        self._handles: dict[str, CompletionHandle] = {}

    @property
    def result(self) -> str:
        return self._result

    def schedule(self, task_id: str, commit: CommitFn) -> CompletionHandle:
        delay = self._delay_picker()
        handle = CompletionHandle(
            task_id=task_id,
            delay=delay,
            result=self._result,
            commit=commit,
            on_finish=self._forget,
        )
        with self._lock:
            self._handles[task_id] = handle
        handle.start()
        logger.debug(
            "Task completion scheduled", extra={"task_id": task_id, "delay_seconds": delay}
        )
        return handle

    def handle(self, task_id: str) -> CompletionHandle | None:
        with self._lock:
            return self._handles.get(task_id)

    def pending(self) -> int:
        with self._lock:
            return len(self._handles)

    def shutdown(self, *, cancel_pending: bool = True, timeout: float | None = None) -> None:
        """Cancel (or wait for) the completions scheduled so far.

        The scheduler stays usable: tasks scheduled afterwards complete as usual.
        """

        with self._lock:
            handles = list(self._handles.values())

        cancelled = 0
        for handle in handles:
            if cancel_pending and handle.cancel():
                cancelled += 1
        for handle in handles:
            handle.wait(timeout)

        if cancelled:
            logger.info("Cancelled pending task completions", extra={"cancelled": cancelled})

    def _forget(self, handle: CompletionHandle) -> None:
        with self._lock:
            if self._handles.get(handle.task_id) is handle:
                del self._handles[handle.task_id]
