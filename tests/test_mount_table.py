import os

import pytest

from registry_mount.core.errors import CommandError, CommandTimeoutError
from registry_mount.core.shell_executor import CommandResult
from registry_mount.storage import mount_table
from registry_mount.storage.mount_table import MountTable

MOUNT_OUTPUT = "\n".join([
    "proc on /proc type proc (rw,nosuid,nodev,noexec,relatime)",
    "filer:8888:/registry on /registry type fuse.swfs (rw,nosuid,nodev,relatime)",
    "/dev/sda1 on / type ext4 (rw,relatime)",
])


@pytest.fixture
def listing(monkeypatch, fake_runner):
    runner = fake_runner(default=CommandResult(success=True, stdout=MOUNT_OUTPUT))
    monkeypatch.setattr(mount_table, "run_command", runner)
    return runner


def test_list_mounts_returns_raw_text(listing):
    assert MountTable().list_mounts() == MOUNT_OUTPUT
    assert listing.commands == ["mount"]


def test_trailing_separator_is_ignored(listing):
    table = MountTable()

    assert table.is_mounted("/registry/", "fuse.swfs")
    assert table.is_mounted("/registry", "fuse.swfs")


def test_type_must_match(listing):
    assert not MountTable().is_mounted("/registry", "fuse.seaweedfs")


def test_other_paths_not_mounted(listing):
    assert not MountTable().is_mounted("/var/lib/registry", "fuse.swfs")


def test_list_mounts_timeout(monkeypatch, fake_runner):
    runner = fake_runner(default=CommandResult(success=False, timed_out=True))
    monkeypatch.setattr(mount_table, "run_command", runner)

    with pytest.raises(CommandTimeoutError):
        MountTable(timeout=0.5).list_mounts()


def test_failed_listing_counts_as_not_mounted(monkeypatch, fake_runner):
    runner = fake_runner(default=CommandResult(success=False, stderr="no", returncode=1))
    monkeypatch.setattr(mount_table, "run_command", runner)
    table = MountTable()

    with pytest.raises(CommandError):
        table.list_mounts()
    assert not table.is_mounted("/registry", "fuse.swfs")


def test_listing_with_undecodable_path(tmp_path, monkeypatch):
    fake_mount = tmp_path / "mount"
    fake_mount.write_bytes(
        b"#!/bin/sh\n"
        b"printf '/dev/sdb1 on /media/caf\\351 type vfat (rw)\\n'\n"
        b"printf 'filer:8888:/registry on /var/lib/registry type fuse.seaweedfs (rw)\\n'\n"
    )
    fake_mount.chmod(0o755)
    monkeypatch.setenv("PATH", f"{tmp_path}{os.pathsep}{os.environ['PATH']}")
    table = MountTable()

    assert table.is_mounted("/var/lib/registry", "fuse.seaweedfs")
    assert not table.is_mounted("/media/cafe", "vfat")
