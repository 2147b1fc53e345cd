"""Lightweight logging setup for the bridge.

Users can override log level with TASKBRIDGE_LOG_LEVEL env var and add a
log file with TASKBRIDGE_LOG_DIR. Handlers always write to stderr because
stdout carries protocol frames.

Also includes a helper to summarize potentially large payloads and results
for logging without dumping them in full.
"""
from __future__ import annotations
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict


def _preview(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def summarize_for_log(obj: Any, *, max_items: int = 8) -> Any:
    """Return a compact, JSON-serializable summary suitable for logging.

    - Dict: size, keys (truncated) and value types
    - List/Tuple: length and a short preview of item types/values
    - str: length and truncated preview
    - Other scalars: returned directly
    """
    try:
        if obj is None or isinstance(obj, (bool, int, float)):
            return obj
        if isinstance(obj, str):
            return {"type": "str", "len": len(obj), "preview": _preview(obj, 200)}
        if isinstance(obj, dict):
            keys = list(obj.keys())[:max_items]
            return {
                "type": "dict",
                "len": len(obj),
                "keys": [str(k) for k in keys],
                "value_types": {str(k): type(obj[k]).__name__ for k in keys},
            }
        if isinstance(obj, (list, tuple)):
            items = list(obj)[:max_items]
            return {
                "type": type(obj).__name__,
                "len": len(obj),
                "preview_types": [type(x).__name__ for x in items],
                "preview": [_preview(str(x), 120) for x in items],
            }
        return {"type": type(obj).__name__}
    except Exception:  # noqa: BLE001
        return {"type": "unprintable"}


def _log_level() -> str:
    return os.getenv("TASKBRIDGE_LOG_LEVEL", "INFO").upper()


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def attach_log_dir(logger: logging.Logger, log_dir: str) -> bool:
    """Add a taskbridge.log file handler under log_dir (once per logger)."""
    p = Path(log_dir)
    file_path = (p / "taskbridge.log").resolve()
    for h in logger.handlers:
        if isinstance(h, logging.FileHandler) and Path(h.baseFilename) == file_path:
            return False
    try:
        p.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(file_path, encoding="utf-8")
    except OSError as e:
        logger.warning(f"cannot open log dir {log_dir}: {e}")
        return False
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(fh)
    return True


def get_logger(name: str = "taskbridge") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(stream_handler)
        # Optional file handler if TASKBRIDGE_LOG_DIR is set
        log_dir = os.getenv("TASKBRIDGE_LOG_DIR")
        if log_dir:
            attach_log_dir(logger, log_dir)
        logger.setLevel(_log_level())
        logger.propagate = False
    return logger


core_logger = get_logger("taskbridge.core")

__all__ = ["get_logger", "attach_log_dir", "core_logger", "summarize_for_log"]
