"""Centralized exception hierarchy for the bridge worker."""
from __future__ import annotations

from typing import Optional


class BridgeError(Exception):
    """Base class for all bridge related errors."""


class ConfigError(BridgeError):
    pass


class RegistrationError(BridgeError):
    pass


class PayloadDecodeError(BridgeError):
    """Accumulated payload text is not valid JSON."""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw


class TaskNotFoundError(BridgeError):
    def __init__(self, task_name: str):
        super().__init__(f'Task "{task_name}" not found for this worker')
        self.task_name = task_name


class TaskExecutionError(BridgeError):
    """A handler raised while running; the original exception is kept on ``cause``."""

    def __init__(self, task_name: str, cause: Optional[BaseException] = None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f'Task "{task_name}" failed{detail}')
        self.task_name = task_name
        self.cause = cause


__all__ = [
    "BridgeError",
    "ConfigError",
    "RegistrationError",
    "PayloadDecodeError",
    "TaskNotFoundError",
    "TaskExecutionError",
]
