"""Bridge protocol engine: reassembles payloads and dispatches commands.

One engine serves one worker process. It owns the payload buffer, the
current payload and the output stream; handlers only see the payload they
are called with. Lines are handled strictly one at a time, so a command's
handler has fully settled before the next line is looked at.
"""
from __future__ import annotations

import asyncio
import inspect
import json
import os
import sys
import time
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, TextIO

from . import protocol
from .errors import BridgeError, PayloadDecodeError, TaskExecutionError
from .logging import core_logger, summarize_for_log
from .registry import TaskRegistry

_TRUTHY = ("1", "true", "yes")


@dataclass(frozen=True)
class BridgeOptions:
    debug: bool = False

    @classmethod
    def from_env(cls) -> "BridgeOptions":
        return cls(debug=os.getenv("TASKBRIDGE_DEBUG", "").lower() in _TRUTHY)


async def _settle(awaitable):
    return await awaitable


def _run_awaitable(awaitable):
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_settle(awaitable))
    if inspect.iscoroutine(awaitable):
        awaitable.close()
    raise RuntimeError("async task cannot run while an event loop is already running in this thread")


class BridgeEngine:
    def __init__(
        self,
        tasks: Mapping,
        options: Optional[BridgeOptions] = None,
        *,
        output: Optional[TextIO] = None,
    ):
        self.tasks = tasks if isinstance(tasks, TaskRegistry) else TaskRegistry(tasks)
        self.options = options or BridgeOptions()
        self._out = output if output is not None else sys.stdout
        self._buffer = ""
        self._payload_start: Optional[float] = None
        self._payload: Any = None
        self._failed = False
        core_logger.debug(f"bridge starting tasks={self.tasks.names()} debug={self.options.debug}")
        self._emit(protocol.READY)

    @property
    def payload(self) -> Any:
        return self._payload

    @property
    def transmitting(self) -> bool:
        return self._payload_start is not None

    # Output ----------------------------------------------------------
    def _emit(self, line: str):
        self._out.write(line + "\n")
        self._out.flush()

    def _debug(self, *parts: Any):
        if self.options.debug:
            self._emit(" ".join(str(p) for p in parts))

    # Line handling ---------------------------------------------------
    def handle_line(self, line: str):
        if self._failed:
            raise BridgeError("bridge stopped after a fatal error")
        line = line.rstrip("\r\n")
        try:
            if line.startswith(protocol.PAYLOAD_CHUNK):
                self._on_chunk(line[len(protocol.PAYLOAD_CHUNK) :])
            elif line == protocol.PAYLOAD_END:
                self._on_payload_end()
            elif line.startswith(protocol.CMD):
                self._on_command(line[len(protocol.CMD) :].strip())
        except BridgeError:
            self._failed = True
            raise

    def run(self, lines: Optional[Iterable[str]] = None):
        """Consume lines until the input is exhausted."""
        for line in (sys.stdin if lines is None else lines):
            self.handle_line(line)
        core_logger.debug("input exhausted")

    def _on_chunk(self, text: str):
        if self._payload_start is None:
            self._payload_start = time.monotonic()
        self._buffer += text.strip()

    def _on_payload_end(self):
        raw = self._buffer
        try:
            decoded = json.loads(raw)
        except json.JSONDecodeError as e:
            core_logger.error(f"payload decode failed at pos {e.pos}: {e.msg}")
            raise PayloadDecodeError(f"Invalid JSON payload: {e.msg}", raw=raw) from e
        except RecursionError as e:
            core_logger.error(f"payload decode failed: nesting too deep (len={len(raw)})")
            raise PayloadDecodeError("Invalid JSON payload: nesting too deep", raw=raw) from e
        self._payload = protocol.PayloadEnvelope.from_json(decoded).unwrap()
        self._buffer = ""
        elapsed_ms = 0.0
        if self._payload_start is not None:
            elapsed_ms = (time.monotonic() - self._payload_start) * 1000
        self._payload_start = None
        core_logger.debug(f"payload received len={len(raw)} in {elapsed_ms:.1f}ms summary={summarize_for_log(self._payload)}")
        self._debug("payload received in", round(elapsed_ms), "ms")
        self._debug("payload :>> ", json.dumps(self._payload))
        self._emit(protocol.PAYLOAD_OK)

    def _on_command(self, name: str):
        task = self.tasks.require(name)
        self._debug("executing command: ", name)
        start = time.monotonic()
        try:
            result = task(self._payload)
            if inspect.isawaitable(result):
                result = _run_awaitable(result)
            chunks = []
            if not protocol.is_empty_result(result):
                chunks = protocol.chunk_text(protocol.serialize_result(result), protocol.RESULT_CHUNK_SIZE)
        except Exception as e:  # noqa: BLE001
            core_logger.error(f"task {name} raised {type(e).__name__}: {e}")
            raise TaskExecutionError(name, e) from e
        for chunk in chunks:
            self._emit(f"{protocol.RESULT_CHUNK}{chunk}")
        core_logger.debug(f"task {name} done in {(time.monotonic() - start) * 1000:.1f}ms result={summarize_for_log(result)}")
        self._emit(protocol.OK)


def bridge(
    tasks: Mapping,
    options: Optional[BridgeOptions] = None,
    *,
    stdin: Optional[Iterable[str]] = None,
    output: Optional[TextIO] = None,
) -> BridgeEngine:
    """Serve ``tasks`` over stdin/stdout (or the given streams) until EOF.

    Async tasks are run on a fresh event loop per command, so the bridge must
    not be started from inside a running loop: an async task called there
    fails with TaskExecutionError and its coroutine is closed unawaited.
    """
    engine = BridgeEngine(tasks, options, output=output)
    engine.run(stdin)
    return engine


__all__ = ["BridgeEngine", "BridgeOptions", "bridge"]
