from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

PLACEHOLDER_RESULT = "Fake result: Hello from sandbox!"


class TaskStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    READY = "ready"


@dataclass(frozen=True, slots=True)
class Task:
    """Point-in-time snapshot of a simulated sandbox task.

    Snapshots are immutable: the store swaps in a new value on completion, so a
    reader always sees status and result from the same write.
    """

    task_id: str
    status: TaskStatus
    created_at: datetime
    result: str = ""
    completed_at: datetime | None = None

    @property
    def is_ready(self) -> bool:
        return self.status is TaskStatus.READY
