#!/usr/bin/env python3
"""
Live mount handle and its teardown (unmount + cache purge).
"""

import os
import shlex
import shutil
from typing import List

from registry_mount.core.errors import CommandError, TeardownError
from registry_mount.core.logger import get_logger
from registry_mount.core.shell_executor import run_command

from .models import MountParameters

logger = get_logger(__name__)

class StorageHandle:
    """
    A confirmed mount at ``mount_path`` with its local cache directory.

    Only the orchestrator creates handles. After ``teardown`` the handle
    is spent; mounting again needs a new one.
    """

    def __init__(self, mount_path: str, params: MountParameters):
        self.mount_path = mount_path
        self.params = params
        self._torn_down = False

    @property
    def cache_dir(self) -> str:
        return self.params.cache_path

    @property
    def is_torn_down(self) -> bool:
        return self._torn_down

    def teardown(self) -> None:
        """
        Unmount and remove the cache directory.

        The cache is removed even if unmounting failed.

        Raises:
            TeardownError: Carrying every step that failed
        """
        if self._torn_down:
            logger.warning(f"Storage at {self.mount_path} already torn down")
            return
        self._torn_down = True

        errors: List[Exception] = []

        try:
            self._unmount()
        except CommandError as e:
            errors.append(e)

        try:
            self._remove_cache_dir()
        except OSError as e:
            logger.error(f"Removing cache dir {self.cache_dir} failed: {e}")
            errors.append(e)

        if errors:
            raise TeardownError(errors)

    def _unmount(self) -> None:
        command = f"umount -f {shlex.quote(self.mount_path)}"
        result = run_command(command)

        if result.success:
            logger.info(f"Unmounted {self.mount_path}")
            return

        logger.error(f"Force unmount of {self.mount_path} failed: {result.stderr}")

        lazy = run_command(f"umount -l {shlex.quote(self.mount_path)}")
        if lazy.success:
            logger.info(f"Lazy unmount of {self.mount_path} succeeded")
        else:
            logger.warning(f"Lazy unmount of {self.mount_path} failed: {lazy.stderr}")

        raise CommandError(command, result.returncode, result.stderr)

    def _remove_cache_dir(self) -> None:
        cache_dir = self.cache_dir
        if not cache_dir:
            return

        try:
            os.stat(cache_dir)
        except FileNotFoundError:
            logger.debug(f"Cache dir {cache_dir} already gone")
            return
        except OSError as e:
            # Exists but unreadable; still try to remove it
            logger.debug(f"Stat of cache dir {cache_dir} failed: {e}")

        shutil.rmtree(cache_dir)
        logger.info(f"Removed cache dir {cache_dir}")

    def __repr__(self) -> str:
        return f"StorageHandle(mount_path={self.mount_path!r}, cache_dir={self.cache_dir!r})"
