"""
Task Bridge

Run Python tasks inside a long-lived worker process driven over a
line-oriented stdin/stdout protocol. Payloads too large for one line are
sent as chunks and reassembled; results are sent back in chunks.
"""

from .core.engine import BridgeEngine, BridgeOptions, bridge
from .core.registry import TaskRegistry
from .core.task_base import Task, TaskBase
from .core.errors import (
    BridgeError,
    ConfigError,
    RegistrationError,
    PayloadDecodeError,
    TaskNotFoundError,
    TaskExecutionError,
)

__version__ = "0.1.0"

__all__ = [
    "BridgeEngine",
    "BridgeOptions",
    "bridge",
    "TaskRegistry",
    "Task",
    "TaskBase",
    "BridgeError",
    "ConfigError",
    "RegistrationError",
    "PayloadDecodeError",
    "TaskNotFoundError",
    "TaskExecutionError",
]
