"""Sandbox task service.

A small HTTP service with:
- simulated asynchronous "sandbox" tasks that complete after a random delay
- polling endpoints for task status and result
- a placeholder username/password registration and login facility
"""

__version__ = "0.1.0"

from sandbox_tasks.config import ServiceSettings

__all__ = ["__version__", "ServiceSettings"]
