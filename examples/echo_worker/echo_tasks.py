"""Sample tasks served by the example worker."""
from typing import Any, Dict

from taskbridge import TaskBase


def echo(payload):
    return payload


def ping(_payload=None):
    return None


def fib(n):
    if n <= 1:
        return 1
    return fib(n - 1) + fib(n - 2)


def get_user(_payload=None) -> Dict[str, Any]:
    return {"name": "Foo", "age": 50, "phones": ["a", "b"]}


def fail(_payload=None):
    raise RuntimeError("task failed")


class CounterTask(TaskBase):
    """Counts calls and adds a configurable step to numeric payloads."""

    def prepare(self):
        self.step = int(self.params.get("step", 1))
        return True

    def run(self, payload: Any = None):
        value = payload if isinstance(payload, (int, float)) else 0
        return {"calls": self.calls, "value": value + self.step}
