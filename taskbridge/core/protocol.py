"""Line protocol spoken between a host process and a bridge worker.

Input frames (host -> worker), one per line::

    PAYLOAD_CHUNK:<text>   append <text> (trimmed) to the payload buffer
    PAYLOAD_END            parse the buffer as JSON, unwrap ``_inner_payload``
    CMD:<name>             run task <name> with the current payload

Output frames (worker -> host)::

    READY                  once, at start-up
    PAYLOAD_OK             payload reassembled and parsed
    RESULT_CHUNK:<text>    <=1000 character slice of the JSON result
    OK                     command finished

Any other line is ignored by both sides.
"""
from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Iterable, List

READY = "READY"
PAYLOAD_OK = "PAYLOAD_OK"
OK = "OK"
PAYLOAD_CHUNK = "PAYLOAD_CHUNK:"
PAYLOAD_END = "PAYLOAD_END"
CMD = "CMD:"
RESULT_CHUNK = "RESULT_CHUNK:"

RESULT_CHUNK_SIZE = 1000
INNER_PAYLOAD_KEY = "_inner_payload"


@dataclass(frozen=True)
class PayloadEnvelope:
    """Decoded payload, possibly wrapped as ``{"_inner_payload": X}``."""

    value: Any
    has_inner: bool = False
    inner: Any = None

    @classmethod
    def from_json(cls, value: Any) -> "PayloadEnvelope":
        if isinstance(value, dict) and INNER_PAYLOAD_KEY in value:
            return cls(value=value, has_inner=True, inner=value[INNER_PAYLOAD_KEY])
        return cls(value=value)

    def unwrap(self) -> Any:
        # one level only; an inner envelope stays as is
        return self.inner if self.has_inner else self.value


def chunk_text(text: str, size: int = RESULT_CHUNK_SIZE) -> List[str]:
    if size <= 0:
        raise ValueError(f"chunk size must be positive, got {size}")
    return [text[i : i + size] for i in range(0, len(text), size)]


def serialize_result(value: Any) -> str:
    # NaN and Infinity have no JSON spelling; json.dumps raises ValueError
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def is_empty_result(value: Any) -> bool:
    """True for results a host never receives: null, false, 0, NaN and "".

    Empty lists and dicts are real results and are sent as ``[]``/``{}``.
    """
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value == ""
    return False


def wrap_payload(value: Any) -> Any:
    """Wrap primitive payloads in the ``_inner_payload`` envelope."""
    if isinstance(value, (str, int, float)):
        return {INNER_PAYLOAD_KEY: value}
    return value


def _transport_chunks(text: str, size: int) -> List[str]:
    # The worker trims every chunk, so no boundary may touch whitespace.
    chunks: List[str] = []
    start = 0
    n = len(text)
    while start < n:
        end = min(start + size, n)
        while start + 1 < end < n and (text[end - 1].isspace() or text[end].isspace()):
            end -= 1
        if end < n and (text[end - 1].isspace() or text[end].isspace()):
            end = start + size
            while end < n and (text[end - 1].isspace() or text[end].isspace()):
                end += 1
        chunks.append(text[start:end])
        start = end
    return chunks


def encode_payload(value: Any, chunk_size: int = RESULT_CHUNK_SIZE, *, wrap: bool = True) -> List[str]:
    """Build the ``PAYLOAD_CHUNK`` frames plus ``PAYLOAD_END`` for a value."""
    if chunk_size <= 0:
        raise ValueError(f"chunk size must be positive, got {chunk_size}")
    if wrap:
        value = wrap_payload(value)
    text = json.dumps(value, separators=(",", ":"))
    frames = [f"{PAYLOAD_CHUNK}{chunk}" for chunk in _transport_chunks(text, chunk_size)]
    frames.append(PAYLOAD_END)
    return frames


def command_frame(name: str) -> str:
    return f"{CMD}{name}"


def decode_result(lines: Iterable[str]) -> Any:
    """Reassemble ``RESULT_CHUNK`` lines into the JSON value they carry."""
    parts = []
    for line in lines:
        line = line.rstrip("\r\n")
        if line.startswith(RESULT_CHUNK):
            parts.append(line[len(RESULT_CHUNK) :])
    if not parts:
        return None
    return json.loads("".join(parts))


__all__ = [
    "READY",
    "PAYLOAD_OK",
    "OK",
    "PAYLOAD_CHUNK",
    "PAYLOAD_END",
    "CMD",
    "RESULT_CHUNK",
    "RESULT_CHUNK_SIZE",
    "INNER_PAYLOAD_KEY",
    "PayloadEnvelope",
    "chunk_text",
    "serialize_result",
    "is_empty_result",
    "wrap_payload",
    "encode_payload",
    "command_frame",
    "decode_result",
]
