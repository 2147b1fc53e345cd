"""Worker configuration loading and normalization.

A worker config names the tasks a bridge worker serves (YAML or Python)::

    debug: false
    search_paths: ["."]
    tasks:
      echo: my_tasks:echo
      stats:
        entry: my_tasks:StatsTask
        params: {window: 10}

parse_config_file(path) returns the normalized dict::

    {"debug": bool, "search_paths": [abs path, ...],
     "tasks": {name: {"entry": "module:attr", "params": {...}}}}
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List
import runpy
import yaml
from .errors import ConfigError

CONFIG_NAMES = ("taskbridge.yaml", "taskbridge.yml", "taskbridge.py")


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return data


def _read_py(path: Path) -> Dict[str, Any]:
    ns = runpy.run_path(str(path))
    if "get_config" not in ns:
        raise ConfigError("Python config must expose get_config()")
    cfg = ns["get_config"]()
    if not isinstance(cfg, dict):
        raise ConfigError("Python config entry must return dict")
    return cfg


def _ensure_list(val):
    if val is None:
        return []
    if isinstance(val, list):
        return val
    return [val]


def normalize_entry(name: str, spec: Any) -> Dict[str, Any]:
    if isinstance(spec, str):
        spec = {"entry": spec}
    if not isinstance(spec, dict):
        raise ConfigError(f"Task {name!r}: expected 'module:attr' or a mapping, got {type(spec).__name__}")
    entry = spec.get("entry")
    if not isinstance(entry, str) or not entry.strip():
        raise ConfigError(f"Task {name!r}: missing entry field")
    entry = entry.strip()
    module_name, _, attr = entry.partition(":")
    if not module_name or not attr:
        raise ConfigError(f"Task {name!r}: entry must be 'module:attr', got {entry!r}")
    params = spec.get("params") or {}
    if not isinstance(params, dict):
        raise ConfigError(f"Task {name!r}: params must be a mapping")
    return {"entry": entry, "params": params}


def normalize_config(data: Dict[str, Any], base_dir: Path | None = None) -> Dict[str, Any]:
    base_dir = base_dir or Path.cwd()
    tasks = data.get("tasks") or {}
    if not isinstance(tasks, dict):
        raise ConfigError("tasks must be a mapping of name -> entry")
    normalized_tasks: Dict[str, Dict[str, Any]] = {}
    for name, spec in tasks.items():
        name = str(name).strip()
        if not name:
            raise ConfigError("task names must be non-empty")
        normalized_tasks[name] = normalize_entry(name, spec)
    search_paths: List[str] = []
    for p in _ensure_list(data.get("search_paths")):
        path = Path(str(p)).expanduser()
        if not path.is_absolute():
            path = base_dir / path
        search_paths.append(str(path.resolve()))
    return {
        "debug": bool(data.get("debug", False)),
        "search_paths": search_paths,
        "tasks": normalized_tasks,
    }


def parse_config_file(path: Path) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    if path.suffix in (".yml", ".yaml"):
        data = _read_yaml(path)
    elif path.suffix == ".py":
        data = _read_py(path)
    else:
        raise ConfigError(f"Unsupported config type: {path.suffix or path.name}")
    return normalize_config(data, base_dir=path.parent.resolve())


def find_config_in_dir(dir_path: Path) -> Path | None:
    for fname in CONFIG_NAMES:
        p = Path(dir_path) / fname
        if p.exists():
            return p
    return None

__all__ = [
    "parse_config_file",
    "normalize_config",
    "normalize_entry",
    "find_config_in_dir",
    "ConfigError",
]
