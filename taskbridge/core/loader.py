"""Import task entries ("module:attr") and build a TaskRegistry."""
from __future__ import annotations
import inspect
import sys
from importlib import import_module
from typing import Any, Dict, List, Optional
from .errors import ConfigError, RegistrationError
from .logging import core_logger
from .registry import TaskRegistry


def add_search_paths(paths: List[str]):
    # keep config order: first path wins
    for p in reversed(paths):
        if p not in sys.path:
            sys.path.insert(0, p)
            core_logger.debug(f"[import] inserted search path {p}")


def import_entry(entry: str):
    module_name, attr = entry.split(":", 1)
    mod = import_module(module_name)
    obj: Any = mod
    for part in attr.split("."):
        obj = getattr(obj, part)
    return obj


def load_task(name: str, entry: str, params: Optional[Dict[str, Any]] = None):
    try:
        target = import_entry(entry)
    except (ImportError, AttributeError) as e:
        raise RegistrationError(f"Failed to import task {name!r} from {entry!r}: {e}") from e
    if inspect.isclass(target):
        task = target(params or {})
        if hasattr(task, "prepare"):
            task.prepare()
        core_logger.debug(f"[load] task={name} instance of {target.__name__}")
        return task
    if params:
        raise ConfigError(f"Task {name!r}: params given but {entry!r} is not a class")
    if not callable(target):
        raise RegistrationError(f"Task {name!r}: {entry!r} is not callable")
    return target


def build_registry(config: Dict[str, Any]) -> TaskRegistry:
    """Build the registry for a normalized worker config."""
    add_search_paths(config.get("search_paths", []))
    tasks = {}
    for name, spec in config.get("tasks", {}).items():
        tasks[name] = load_task(name, spec["entry"], spec.get("params"))
    core_logger.info(f"loaded {len(tasks)} task(s): {', '.join(sorted(tasks)) or '-'}")
    return TaskRegistry(tasks)

__all__ = ["add_search_paths", "import_entry", "load_task", "build_registry"]
