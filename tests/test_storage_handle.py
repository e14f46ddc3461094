import os

import pytest

from registry_mount.core.errors import CommandError, TeardownError
from registry_mount.core.shell_executor import CommandResult
from registry_mount.storage import storage_handle
from registry_mount.storage.models import MountParameters
from registry_mount.storage.storage_handle import StorageHandle

FAILED = CommandResult(success=False, stderr="target is busy", returncode=32)


@pytest.fixture
def cache_dir(tmp_path):
    path = tmp_path / "AbCdEfGhIj"
    path.mkdir()
    (path / "chunk").write_bytes(b"cached data")
    return str(path)


def make_handle(cache_dir):
    return StorageHandle("/var/lib/registry", MountParameters(filer="filer:8888", cache_path=cache_dir))


def test_teardown_unmounts_and_removes_cache(monkeypatch, fake_runner, cache_dir):
    runner = fake_runner()
    monkeypatch.setattr(storage_handle, "run_command", runner)

    make_handle(cache_dir).teardown()

    assert runner.commands == ["umount -f /var/lib/registry"]
    assert not os.path.exists(cache_dir)


def test_force_unmount_failure_falls_back_to_lazy(monkeypatch, fake_runner, cache_dir):
    runner = fake_runner(responses={"umount -f": FAILED})
    monkeypatch.setattr(storage_handle, "run_command", runner)

    with pytest.raises(TeardownError) as exc_info:
        make_handle(cache_dir).teardown()

    assert runner.commands == ["umount -f /var/lib/registry", "umount -l /var/lib/registry"]
    assert len(exc_info.value.errors) == 1
    assert isinstance(exc_info.value.errors[0], CommandError)
    assert not os.path.exists(cache_dir)


def test_both_failures_are_reported(monkeypatch, fake_runner, cache_dir):
    monkeypatch.setattr(storage_handle, "run_command", fake_runner(default=FAILED))

    def broken_rmtree(path):
        raise PermissionError(13, "Permission denied", path)

    monkeypatch.setattr(storage_handle.shutil, "rmtree", broken_rmtree)

    with pytest.raises(TeardownError) as exc_info:
        make_handle(cache_dir).teardown()

    errors = exc_info.value.errors
    assert len(errors) == 2
    assert isinstance(errors[0], CommandError)
    assert isinstance(errors[1], PermissionError)


def test_missing_cache_dir_is_not_an_error(monkeypatch, fake_runner, tmp_path):
    monkeypatch.setattr(storage_handle, "run_command", fake_runner())

    make_handle(str(tmp_path / "already-gone")).teardown()


def test_teardown_runs_once(monkeypatch, fake_runner, cache_dir):
    runner = fake_runner()
    monkeypatch.setattr(storage_handle, "run_command", runner)
    handle = make_handle(cache_dir)

    handle.teardown()
    handle.teardown()

    assert handle.is_torn_down
    assert runner.commands == ["umount -f /var/lib/registry"]
    assert not os.path.exists(cache_dir)


def test_unmount_quotes_mount_path(monkeypatch, fake_runner, cache_dir):
    runner = fake_runner(responses={"umount -f": FAILED})
    monkeypatch.setattr(storage_handle, "run_command", runner)
    handle = StorageHandle("/mnt/my registry", MountParameters(filer="filer:8888", cache_path=cache_dir))

    with pytest.raises(TeardownError):
        handle.teardown()

    assert runner.commands == ["umount -f '/mnt/my registry'", "umount -l '/mnt/my registry'"]
