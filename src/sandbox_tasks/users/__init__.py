from __future__ import annotations

__all__ = ["UserStore", "issue_token"]

from sandbox_tasks.users.store import UserStore, issue_token
