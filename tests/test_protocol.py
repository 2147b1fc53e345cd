import json

import pytest

from taskbridge.core import protocol
from taskbridge.core.protocol import (
    PayloadEnvelope,
    chunk_text,
    command_frame,
    decode_result,
    encode_payload,
    is_empty_result,
    serialize_result,
    wrap_payload,
)


def test_chunk_text_sizes():
    assert chunk_text("abcdefg", 3) == ["abc", "def", "g"]
    assert chunk_text("abc", 3) == ["abc"]
    assert chunk_text("", 3) == []
    with pytest.raises(ValueError):
        chunk_text("abc", 0)


def test_envelope_from_json():
    env = PayloadEnvelope.from_json({"_inner_payload": [1, 2], "other": True})
    assert env.has_inner
    assert env.unwrap() == [1, 2]
    plain = PayloadEnvelope.from_json([{"_inner_payload": 1}])
    assert not plain.has_inner
    assert plain.unwrap() == [{"_inner_payload": 1}]


def test_envelope_inner_null():
    env = PayloadEnvelope.from_json({"_inner_payload": None})
    assert env.has_inner
    assert env.unwrap() is None


def test_serialize_result_compact():
    assert serialize_result({"a": 1, "b": [1, 2]}) == '{"a":1,"b":[1,2]}'


def test_is_empty_result():
    assert is_empty_result(None)
    assert is_empty_result(False)
    assert is_empty_result(0)
    assert is_empty_result("")
    assert not is_empty_result([])
    assert not is_empty_result({})
    assert not is_empty_result(True)
    assert not is_empty_result(-1)
    assert not is_empty_result("0")


def test_wrap_payload():
    assert wrap_payload(20) == {"_inner_payload": 20}
    assert wrap_payload("test") == {"_inner_payload": "test"}
    assert wrap_payload({"a": 1}) == {"a": 1}
    assert wrap_payload(None) is None


def test_encode_payload_frames():
    frames = encode_payload({"a": "b"}, chunk_size=4)
    assert frames[-1] == protocol.PAYLOAD_END
    assert all(f.startswith(protocol.PAYLOAD_CHUNK) for f in frames[:-1])
    body = "".join(f[len(protocol.PAYLOAD_CHUNK) :] for f in frames[:-1])
    assert json.loads(body) == {"a": "b"}


def test_encode_payload_keeps_whitespace_off_boundaries():
    text_value = "word " * 30
    frames = encode_payload(text_value, chunk_size=5)
    for frame in frames[:-1]:
        chunk = frame[len(protocol.PAYLOAD_CHUNK) :]
        assert chunk == chunk.strip()
    body = "".join(f[len(protocol.PAYLOAD_CHUNK) :].strip() for f in frames[:-1])
    assert json.loads(body) == {"_inner_payload": text_value}


def test_encode_payload_without_wrap():
    frames = encode_payload(5, wrap=False)
    assert frames == ["PAYLOAD_CHUNK:5", "PAYLOAD_END"]
    with pytest.raises(ValueError):
        encode_payload(5, chunk_size=0)


def test_command_frame():
    assert command_frame("getUser") == "CMD:getUser"


def test_decode_result_ignores_other_lines():
    lines = ["READY", "pong", 'RESULT_CHUNK:{"a":', "RESULT_CHUNK:[1, 2]}\n", "OK"]
    assert decode_result(lines) == {"a": [1, 2]}
    assert decode_result(["OK"]) is None
