import subprocess
import sys
from pathlib import Path

from taskbridge.core.protocol import command_frame, decode_result, encode_payload

ROOT = Path(__file__).resolve().parent.parent
EXAMPLES = ROOT / "examples" / "echo_worker"


def run_worker(lines, timeout=60):
    proc = subprocess.run(
        [sys.executable, "-m", "taskbridge.cli", "run", "--config", str(EXAMPLES / "taskbridge.yaml")],
        input="".join(line + "\n" for line in lines),
        capture_output=True,
        text=True,
        encoding="utf-8",
        timeout=timeout,
        cwd=str(ROOT),
    )
    return proc.returncode, proc.stdout.splitlines()


def test_worker_round_trip_large_payload():
    payload = {"users": [{"id": i, "name": f"user {i}", "tags": ["a b", "c"]} for i in range(300)]}
    frames = encode_payload(payload) + [command_frame("echo"), command_frame("getUser")]
    code, out = run_worker(frames)
    assert code == 0
    assert out[0] == "READY"
    assert out.count("PAYLOAD_OK") == 1
    first_ok = out.index("OK")
    assert decode_result(out[:first_ok]) == payload
    assert decode_result(out[first_ok + 1 :]) == {"name": "Foo", "age": 50, "phones": ["a", "b"]}
    assert out[-1] == "OK"


def test_worker_exits_on_failing_task():
    code, out = run_worker([command_frame("ping"), command_frame("error"), command_frame("ping")])
    assert code == 1
    assert out == ["READY", "OK"]
