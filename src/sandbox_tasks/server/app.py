"""FastAPI app factory.

Stores are constructed here (or passed in by tests) and attached to
``app.state``; routes reach them through dependencies rather than module-level
globals, so every app instance has isolated state.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from sandbox_tasks import __version__
from sandbox_tasks.config import ServiceSettings
from sandbox_tasks.server.routes import router
from sandbox_tasks.tasks.completion import CompletionScheduler, random_delay
from sandbox_tasks.tasks.retention import RetentionSweeper
from sandbox_tasks.tasks.store import TaskStore
from sandbox_tasks.users.store import UserStore

logger = logging.getLogger(__name__)


def build_task_store(settings: ServiceSettings) -> TaskStore:
    scheduler = CompletionScheduler(
        random_delay(settings.min_delay_seconds, settings.max_delay_seconds),
        result=settings.result_text,
    )
    return TaskStore(scheduler)


async def _bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug(
        "Rejected malformed request",
        extra={"path": request.url.path, "errors": len(exc.errors())},
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": "bad request"})


def create_app(
    settings: ServiceSettings | None = None,
    *,
    task_store: TaskStore | None = None,
    user_store: UserStore | None = None,
) -> FastAPI:
    if settings is None:
        settings = ServiceSettings()
    # Empty stores are falsy (they define __len__), so compare against None.
    tasks = task_store if task_store is not None else build_task_store(settings)
    users = user_store if user_store is not None else UserStore()
    sweeper = (
        RetentionSweeper(
            tasks,
            ttl_seconds=settings.task_ttl_seconds,
            interval_seconds=settings.sweep_interval_seconds,
        )
        if settings.retention_enabled
        else None
    )

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if sweeper is not None:
            sweeper.start()
            logger.info(
                "Task retention enabled",
                extra={"ttl_seconds": settings.task_ttl_seconds},
            )
        try:
            yield
        finally:
            if sweeper is not None:
                sweeper.stop()
            tasks.close()

    app = FastAPI(
        title="Sandbox Tasks",
        version=__version__,
        description="Simulated asynchronous sandbox tasks with status polling.",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.task_store = tasks
    app.state.user_store = users
    app.state.retention_sweeper = sweeper

    app.add_exception_handler(RequestValidationError, _bad_request)
    app.include_router(router)
    return app
