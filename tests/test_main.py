import json

import pytest

from registry_mount import main
from registry_mount.core.errors import MountNotConfirmedError, TeardownError


class FakeHandle:
    mount_path = "/var/lib/registry"
    cache_dir = "/tmp/cache"

    def __init__(self, error=None):
        self.error = error
        self.teardowns = 0

    def teardown(self):
        self.teardowns += 1
        if self.error:
            raise self.error


@pytest.fixture
def options(tmp_path):
    def _write(registry_command):
        path = tmp_path / "options.json"
        path.write_text(json.dumps({"registry_command": registry_command, "log_level": "OFF"}))
        return str(path)

    return _write


def test_storage_failure_exits_non_zero(options, monkeypatch):
    def fail(config):
        raise MountNotConfirmedError("not mounted")

    monkeypatch.setattr(main, "new_storage", fail)

    assert main.run(options("exit 0")) == 1


def test_config_failure_exits_non_zero(tmp_path):
    path = tmp_path / "options.json"
    path.write_text("{broken")

    assert main.run(str(path)) == 1


def test_registry_runs_then_storage_is_torn_down(options, monkeypatch):
    handle = FakeHandle()
    monkeypatch.setattr(main, "new_storage", lambda config: handle)

    assert main.run(options("exit 0")) == 0
    assert handle.teardowns == 1


def test_registry_failure_still_tears_down(options, monkeypatch):
    handle = FakeHandle()
    monkeypatch.setattr(main, "new_storage", lambda config: handle)

    assert main.run(options("exit 3")) == 1
    assert handle.teardowns == 1


def test_teardown_failure_exits_non_zero(options, monkeypatch):
    handle = FakeHandle(TeardownError([OSError("busy")]))
    monkeypatch.setattr(main, "new_storage", lambda config: handle)

    assert main.run(options("exit 0")) == 1
