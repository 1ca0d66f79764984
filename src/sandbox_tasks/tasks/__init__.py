"""Task lifecycle: snapshots, the in-memory store and background completion."""

from __future__ import annotations

__all__ = [
    "PLACEHOLDER_RESULT",
    "CompletionHandle",
    "CompletionScheduler",
    "RetentionSweeper",
    "Task",
    "TaskStatus",
    "TaskStore",
    "fixed_delay",
    "random_delay",
]

from sandbox_tasks.tasks.completion import (
    CompletionHandle,
    CompletionScheduler,
    fixed_delay,
    random_delay,
)
from sandbox_tasks.tasks.models import PLACEHOLDER_RESULT, Task, TaskStatus
from sandbox_tasks.tasks.retention import RetentionSweeper
from sandbox_tasks.tasks.store import TaskStore
