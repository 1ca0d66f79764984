"""In-memory task store.

All tasks live for the process lifetime unless a retention sweeper evicts
completed ones. The mapping and the task values are guarded by a single
reader/writer lock: status/result reads share it, creation and the completion
write take it exclusively and only for as long as the dict update takes.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime, timedelta

from sandbox_tasks.tasks.completion import CompletionHandle, CompletionScheduler
from sandbox_tasks.tasks.models import Task, TaskStatus
from sandbox_tasks.tasks.rwlock import ReadWriteLock

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class TaskStore:
    def __init__(
        self,
        scheduler: CompletionScheduler | None = None,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._scheduler = scheduler if scheduler is not None else CompletionScheduler()
        self._clock = clock
        self._lock = ReadWriteLock()
        self._tasks: dict[str, Task] = {}

    @property
    def scheduler(self) -> CompletionScheduler:
        return self._scheduler

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._tasks)

    def create_task(self) -> Task:
        """Register a new in-progress task and schedule its completion.

        Returns immediately; the task turns ready in the background.
        """

        with self._lock.write():
            task_id = str(uuid.uuid4())
            while task_id in self._tasks:
                task_id = str(uuid.uuid4())
            task = Task(task_id=task_id, status=TaskStatus.IN_PROGRESS, created_at=self._clock())
            self._tasks[task_id] = task

        try:
            handle = self._scheduler.schedule(task_id, self.complete_task)
        except Exception:
            # A task nobody will complete must not stay visible as in progress.
            with self._lock.write():
                self._tasks.pop(task_id, None)
            raise
        logger.info(
            "Task created", extra={"task_id": task_id, "delay_seconds": handle.delay}
        )
        return task

    def get_task(self, task_id: str) -> Task | None:
        with self._lock.read():
            return self._tasks.get(task_id)

    def complete_task(self, task_id: str, result: str) -> Task:
        """Apply the one-time ``in_progress -> ready`` transition.

        Completing an already-ready task is a no-op.
        """

        if not result:
            raise ValueError("A ready task needs a non-empty result")

        with self._lock.write():
            current = self._tasks.get(task_id)
            if current is None:
                raise KeyError(task_id)
            if current.is_ready:
                return current
            completed = replace(
                current,
                status=TaskStatus.READY,
                result=result,
                completed_at=self._clock(),
            )
            self._tasks[task_id] = completed

        logger.info("Task completed", extra={"task_id": task_id})
        return completed

    def completion(self, task_id: str) -> CompletionHandle | None:
        """Handle of the task's pending completion, if it has not committed yet."""
        return self._scheduler.handle(task_id)

    def evict_completed(self, older_than: timedelta) -> int:
        """Drop ready tasks that completed more than ``older_than`` ago."""

        cutoff = self._clock() - older_than
        with self._lock.write():
            expired = [
                task_id
                for task_id, task in self._tasks.items()
                if task.completed_at is not None and task.completed_at <= cutoff
            ]
            for task_id in expired:
                del self._tasks[task_id]

        if expired:
            logger.info("Evicted completed tasks", extra={"evicted": len(expired)})
        return len(expired)

    def close(self, timeout: float | None = None) -> None:
        """Cancel completions still waiting. Tasks created afterwards complete normally."""
        self._scheduler.shutdown(cancel_pending=True, timeout=timeout)
