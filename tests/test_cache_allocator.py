import os

from registry_mount.storage import cache_allocator
from registry_mount.storage.cache_allocator import allocate_cache_dir, random_suffix, release_cache_dir


def test_random_suffix_is_ten_letters():
    suffix = random_suffix()

    assert len(suffix) == 10
    assert suffix.isalpha()
    assert suffix.isascii()


def test_allocates_fresh_directories(tmp_path):
    first = allocate_cache_dir(str(tmp_path))
    second = allocate_cache_dir(str(tmp_path))

    assert first and second
    assert first != second
    assert os.path.isdir(first)
    assert os.path.dirname(first) == str(tmp_path)


def test_retries_after_collision(tmp_path, monkeypatch):
    names = iter(["taken", "taken", "free"])
    monkeypatch.setattr(cache_allocator, "random_suffix", lambda: next(names))
    (tmp_path / "taken").mkdir()

    path = allocate_cache_dir(str(tmp_path))

    assert path == str(tmp_path / "free")


def test_gives_up_after_all_attempts_collide(tmp_path, monkeypatch):
    calls = []

    def colliding():
        calls.append(1)
        return "taken"

    monkeypatch.setattr(cache_allocator, "random_suffix", colliding)
    (tmp_path / "taken").mkdir()

    assert allocate_cache_dir(str(tmp_path)) == ""
    assert len(calls) == 100


def test_missing_root_fails(tmp_path):
    assert allocate_cache_dir(str(tmp_path / "nope"), attempts=3) == ""


def test_release_removes_directory_and_contents(tmp_path):
    path = allocate_cache_dir(str(tmp_path))
    with open(os.path.join(path, "chunk"), "wb") as f:
        f.write(b"cached data")

    assert release_cache_dir(path) is True
    assert not os.path.exists(path)


def test_release_of_missing_or_empty_path_is_a_noop(tmp_path):
    assert release_cache_dir("") is True
    assert release_cache_dir(str(tmp_path / "gone")) is True


def test_release_failure_is_reported_not_raised(tmp_path, monkeypatch):
    path = allocate_cache_dir(str(tmp_path))

    def broken_rmtree(target):
        raise PermissionError(13, "Permission denied", target)

    monkeypatch.setattr(cache_allocator.shutil, "rmtree", broken_rmtree)

    assert release_cache_dir(path) is False
    assert os.path.isdir(path)
