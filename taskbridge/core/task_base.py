"""TaskBase: optional base class for stateful bridge tasks.

Any callable ``(payload) -> result`` can be registered as a task; subclass
TaskBase when a task needs parameters, one-off preparation or cleanup.
"""
from __future__ import annotations
from typing import Any, Awaitable, Callable, Dict, Optional, Union

Task = Callable[[Any], Union[Any, Awaitable[Any]]]


class TaskBase:
    def __init__(self, params: Optional[Dict[str, Any]] = None):
        self.params = params or {}
        self.calls = 0

    # Lifecycle hooks -------------------------------------------------
    def prepare(self):
        """Lightweight initialization (parse params, open resources)."""
        return True

    def run(self, payload: Any = None) -> Any:  # pragma: no cover - base
        raise NotImplementedError

    def shutdown(self):
        pass

    def __call__(self, payload: Any = None) -> Any:
        self.calls += 1
        return self.run(payload)

__all__ = ["Task", "TaskBase"]
