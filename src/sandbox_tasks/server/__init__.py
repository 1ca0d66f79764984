"""FastAPI server adapter for sandbox-tasks.

Design intent:
- Keep the task lifecycle in `sandbox_tasks.tasks.*`
- Keep server-specific concerns (routing and lifespan) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from sandbox_tasks.server.app import create_app
