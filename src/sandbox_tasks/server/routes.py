"""HTTP routes for tasks and users.

Handlers are thin: they resolve the stores created by :func:`create_app` from
``app.state`` and translate store results into status codes.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from sandbox_tasks import __version__
from sandbox_tasks.server.models import (
    Credentials,
    HealthResponse,
    TaskCreated,
    TaskResultResponse,
    TaskStatusResponse,
    TokenResponse,
)
from sandbox_tasks.tasks.models import Task
from sandbox_tasks.tasks.store import TaskStore
from sandbox_tasks.users.store import UserStore, issue_token

logger = logging.getLogger(__name__)

router = APIRouter()


def get_task_store(request: Request) -> TaskStore:
    return request.app.state.task_store


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


TaskStoreDep = Annotated[TaskStore, Depends(get_task_store)]
UserStoreDep = Annotated[UserStore, Depends(get_user_store)]


def _task_or_404(store: TaskStore, task_id: str) -> Task:
    task = store.get_task(task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="task not found")
    return task


@router.get("/health", response_model=HealthResponse)
def health(store: TaskStoreDep) -> HealthResponse:
    return HealthResponse(status="ok", version=__version__, tasks=len(store))


@router.post("/task", response_model=TaskCreated, status_code=status.HTTP_201_CREATED)
def create_task(store: TaskStoreDep) -> TaskCreated:
    task = store.create_task()
    return TaskCreated(task_id=task.task_id)


@router.get("/status/{task_id}", response_model=TaskStatusResponse)
def get_status(task_id: str, store: TaskStoreDep) -> TaskStatusResponse:
    return TaskStatusResponse(status=_task_or_404(store, task_id).status)


@router.get("/result/{task_id}", response_model=TaskResultResponse)
def get_result(task_id: str, store: TaskStoreDep) -> TaskResultResponse:
    return TaskResultResponse(result=_task_or_404(store, task_id).result)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    responses={400: {"description": "Malformed body or username already taken."}},
)
def register(credentials: Credentials, users: UserStoreDep) -> Response:
    if not users.register(credentials.username, credentials.password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="user already exists")
    return Response(status_code=status.HTTP_201_CREATED)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        400: {"description": "Malformed body."},
        401: {"description": "Unknown user or wrong password."},
    },
)
def login(credentials: Credentials, users: UserStoreDep) -> TokenResponse:
    if not users.login(credentials.username, credentials.password):
        logger.info("Login rejected", extra={"username": credentials.username})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid credentials"
        )
    return TokenResponse(token=issue_token(credentials.username))
