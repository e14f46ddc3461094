import pytest

from registry_mount.config.loader import Config, StorageConfig
from registry_mount.core.shell_executor import CommandResult


class FakeRunner:
    """Stands in for run_command; answers by command prefix and records every call"""

    def __init__(self, responses=None, default=None):
        self.responses = responses or {}
        self.default = default or CommandResult(success=True)
        self.commands = []
        self.options = []

    def __call__(self, command, timeout=None, tail_lines=None):
        self.commands.append(command)
        self.options.append({"timeout": timeout, "tail_lines": tail_lines})
        for prefix, response in self.responses.items():
            if command.startswith(prefix):
                if callable(response):
                    return response(command)
                return response
        return self.default


@pytest.fixture
def fake_runner():
    return FakeRunner


@pytest.fixture
def make_config(tmp_path):
    def _make(**overrides):
        storage = overrides.pop("storage", None) or StorageConfig(
            type="swfs",
            mount_path="/var/lib/registry",
            param={
                "cache_capacity": 0,
                "filer": "filer:8888",
                "filer_path": "/registry",
                "volume_server_access": "",
            },
        )
        values = dict(
            storage=storage,
            mount_helper="/usr/bin/weed mount",
            fs_type="fuse.seaweedfs",
            cache_root=str(tmp_path),
            poll_attempts=3,
            poll_interval=0.01,
            mount_list_timeout=10,
            filer_wait_seconds=0,
            registry_command="exit 0",
            log_level="INFO",
            log_file="",
        )
        values.update(overrides)
        return Config(**values)

    return _make
