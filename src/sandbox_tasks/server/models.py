"""Pydantic models for the REST server."""

from __future__ import annotations

from pydantic import BaseModel, Field

from sandbox_tasks.tasks.models import TaskStatus


class TaskCreated(BaseModel):
    task_id: str


class TaskStatusResponse(BaseModel):
    status: TaskStatus


class TaskResultResponse(BaseModel):
    result: str = Field(default="", description="Empty until the task is ready.")


class Credentials(BaseModel):
    # Missing fields decode as empty strings. A non-JSON, wrongly typed, absent
    # or literal `null` body is rejected with 400.
    username: str = ""
    password: str = ""


class TokenResponse(BaseModel):
    token: str


class HealthResponse(BaseModel):
    status: str
    version: str
    tasks: int
