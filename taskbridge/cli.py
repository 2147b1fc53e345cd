"""CLI entrypoint: run a bridge worker on stdin/stdout."""
from __future__ import annotations
import argparse
import os
import sys
from pathlib import Path
from typing import Any, Dict, List

from .core.config_loader import find_config_in_dir, normalize_config, normalize_entry, parse_config_file
from .core.engine import BridgeEngine, BridgeOptions
from .core.errors import BridgeError, ConfigError, RegistrationError
from .core.loader import build_registry
from .core.logging import attach_log_dir, core_logger, get_logger

logger = get_logger("taskbridge.cli")


def build_parser():
    p = argparse.ArgumentParser(prog="taskbridge", description="Task bridge worker")
    sub = p.add_subparsers(dest="command")
    run = sub.add_parser("run", help="Serve tasks over stdin/stdout until EOF")
    run.add_argument("--config", help="Worker config file (YAML or Python), or a directory containing one")
    run.add_argument(
        "--task",
        action="append",
        dest="tasks",
        default=[],
        metavar="NAME=MODULE:ATTR",
        help="Register a task (repeatable). Overrides a config task of the same name.",
    )
    run.add_argument(
        "--search-path",
        action="append",
        dest="search_paths",
        default=[],
        help="Directory prepended to sys.path before importing tasks (repeatable)",
    )
    run.add_argument("--debug", action="store_true", help="Write diagnostic lines to stdout")
    run.add_argument(
        "--log-dir",
        help="Directory to write log file (taskbridge.log). If not set, only stderr is used.",
    )
    return p


def _parse_task_args(values: List[str]) -> Dict[str, Dict[str, Any]]:
    tasks: Dict[str, Dict[str, Any]] = {}
    for raw in values:
        name, sep, entry = raw.partition("=")
        if not sep or not name.strip():
            raise ConfigError(f"--task expects NAME=MODULE:ATTR, got {raw!r}")
        tasks[name.strip()] = normalize_entry(name.strip(), entry)
    return tasks


def load_worker_config(args) -> Dict[str, Any]:
    if args.config:
        path = Path(args.config)
        if path.is_dir():
            found = find_config_in_dir(path)
            if found is None:
                raise ConfigError(f"No taskbridge config found in {path}")
            path = found
        config = parse_config_file(path)
    else:
        config = normalize_config({})
    config["tasks"].update(_parse_task_args(args.tasks))
    extra = normalize_config({"search_paths": args.search_paths})["search_paths"]
    config["search_paths"] = extra + config["search_paths"]
    if args.debug or BridgeOptions.from_env().debug:
        config["debug"] = True
    return config


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command != "run":
        parser.print_help()
        return 1
    if getattr(args, "log_dir", None):
        os.environ.setdefault("TASKBRIDGE_LOG_DIR", str(Path(args.log_dir).resolve()))
        for lg in (core_logger, logger):
            attach_log_dir(lg, args.log_dir)
    try:
        config = load_worker_config(args)
        registry = build_registry(config)
    except (ConfigError, RegistrationError) as e:
        logger.error(f"worker config error: {e}")
        return 2
    engine = BridgeEngine(registry, BridgeOptions(debug=config["debug"]), output=sys.stdout)
    try:
        engine.run(sys.stdin)
    except BridgeError:
        logger.exception("fatal bridge error, stopping worker")
        return 1
    finally:
        registry.shutdown()
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
