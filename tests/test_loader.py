from pathlib import Path
import pytest
from taskbridge.core.loader import build_registry, load_task
from taskbridge.core.errors import ConfigError, RegistrationError

MODULE = '''
from taskbridge import TaskBase

def double(x):
    return x * 2

class Scaled(TaskBase):
    def prepare(self):
        self.factor = self.params.get("factor", 1)
        self.prepared = True
        return True

    def run(self, payload=None):
        return payload * self.factor

class Holder:
    class Inner:
        @staticmethod
        def hello(_p=None):
            return "hi"

NOT_CALLABLE = 3
'''


@pytest.fixture
def task_dir(tmp_path: Path):
    (tmp_path / "bridge_loader_tasks.py").write_text(MODULE)
    return tmp_path


def test_build_registry_from_config(task_dir: Path):
    config = {
        "search_paths": [str(task_dir)],
        "tasks": {
            "double": {"entry": "bridge_loader_tasks:double", "params": {}},
            "scaled": {"entry": "bridge_loader_tasks:Scaled", "params": {"factor": 3}},
            "hello": {"entry": "bridge_loader_tasks:Holder.Inner.hello", "params": {}},
        },
    }
    reg = build_registry(config)
    assert reg.names() == ["double", "hello", "scaled"]
    assert reg["double"](4) == 8
    assert reg["scaled"].prepared is True
    assert reg["scaled"](2) == 6
    assert reg["hello"]() == "hi"


def test_load_task_errors(task_dir: Path):
    build_registry({"search_paths": [str(task_dir)], "tasks": {}})
    with pytest.raises(RegistrationError):
        load_task("x", "no_such_module_for_bridge:thing")
    with pytest.raises(RegistrationError):
        load_task("x", "bridge_loader_tasks:missing")
    with pytest.raises(RegistrationError):
        load_task("x", "bridge_loader_tasks:NOT_CALLABLE")
    with pytest.raises(ConfigError):
        load_task("x", "bridge_loader_tasks:double", {"factor": 2})
