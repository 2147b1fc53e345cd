"""Read-only task registry: command name -> handler."""
from __future__ import annotations
from collections.abc import Mapping
from typing import Dict, Iterator, List, Optional
from .errors import RegistrationError, TaskNotFoundError
from .task_base import Task, TaskBase


class TaskRegistry(Mapping):
    """Immutable mapping of task names to handlers, fixed at construction."""

    def __init__(self, tasks: Optional[Mapping] = None):
        self._tasks: Dict[str, Task] = {}
        for name, task in (tasks or {}).items():
            if not isinstance(name, str) or not name.strip():
                raise RegistrationError(f"Invalid task name: {name!r}")
            if not callable(task):
                raise RegistrationError(f"Task {name!r} is not callable: {type(task).__name__}")
            key = name.strip()
            if key in self._tasks:
                raise RegistrationError(f"Duplicate task name: {key!r}")
            self._tasks[key] = task

    def __getitem__(self, name: str) -> Task:
        return self._tasks[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def require(self, name: str) -> Task:
        task = self._tasks.get(name)
        if task is None:
            raise TaskNotFoundError(name)
        return task

    def names(self) -> List[str]:
        return sorted(self._tasks)

    def shutdown(self):
        """Call ``shutdown`` on every TaskBase handler, once per instance."""
        seen = set()
        for task in self._tasks.values():
            if isinstance(task, TaskBase) and id(task) not in seen:
                seen.add(id(task))
                task.shutdown()

    def __repr__(self) -> str:
        return f"TaskRegistry({self.names()})"

__all__ = ["TaskRegistry"]
