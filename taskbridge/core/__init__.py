"""Core components of the task bridge.

Modules:
  protocol: line frames, payload envelope and chunking helpers.
  engine: the bridge protocol engine driving one worker process.
  registry: read-only mapping of command names to tasks.
  task_base: optional base class for stateful tasks.
  config_loader: parse YAML/Python worker configs.
  loader: import task entries and build a registry.
  errors: exception hierarchy.
  logging: logger setup and payload summaries.
"""

from .engine import BridgeEngine, BridgeOptions, bridge  # noqa: F401
from .registry import TaskRegistry  # noqa: F401
