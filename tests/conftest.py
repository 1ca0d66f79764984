"""Test configuration and fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from sandbox_tasks.config import ServiceSettings
from sandbox_tasks.server.app import create_app
from sandbox_tasks.tasks.completion import CompletionScheduler, fixed_delay
from sandbox_tasks.tasks.store import TaskStore
from sandbox_tasks.users.store import UserStore

# Long enough that nothing completes unless a test triggers it.
PARKED_DELAY_SECONDS = 3600.0


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep a developer's environment or .env from leaking into tests."""
    for name in (
        "SANDBOX_HOST",
        "SANDBOX_PORT",
        "LOG_LEVEL",
        "SANDBOX_MIN_DELAY_SECONDS",
        "SANDBOX_MAX_DELAY_SECONDS",
        "SANDBOX_RESULT_TEXT",
        "SANDBOX_TASK_TTL_SECONDS",
        "SANDBOX_SWEEP_INTERVAL_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def scheduler() -> CompletionScheduler:
    """Scheduler whose completions only fire when triggered."""
    return CompletionScheduler(fixed_delay(PARKED_DELAY_SECONDS))


@pytest.fixture
def task_store(scheduler: CompletionScheduler) -> Iterator[TaskStore]:
    store = TaskStore(scheduler)
    yield store
    store.close(timeout=5)


@pytest.fixture
def user_store() -> UserStore:
    return UserStore()


@pytest.fixture
def settings() -> ServiceSettings:
    return ServiceSettings(_env_file=None)


@pytest.fixture
def client(
    settings: ServiceSettings, task_store: TaskStore, user_store: UserStore
) -> TestClient:
    app = create_app(settings, task_store=task_store, user_store=user_store)
    return TestClient(app)
