#!/usr/bin/env python3
"""
Mount table reader.

Matching is textual: a path counts as mounted when the output of ``mount``
contains ``on <path> type <fstype>``. This depends on the util-linux output
format and breaks on paths containing " type " or on a different ``mount``
implementation.
"""

from registry_mount.core.errors import CommandError, CommandTimeoutError
from registry_mount.core.logger import get_logger
from registry_mount.core.shell_executor import run_command

logger = get_logger(__name__)

class MountTable:
    """Queries the OS mount table through the ``mount`` command"""

    LIST_COMMAND = "mount"
    DEFAULT_TIMEOUT = 10.0

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def list_mounts(self) -> str:
        """
        Return the raw text of the mount table.

        Raises:
            CommandTimeoutError: If listing took longer than the timeout
            CommandError: If the listing command failed
        """
        result = run_command(self.LIST_COMMAND, timeout=self.timeout)

        if result.timed_out:
            raise CommandTimeoutError(self.LIST_COMMAND, self.timeout)
        if not result.success:
            raise CommandError(self.LIST_COMMAND, result.returncode, result.stderr)

        return result.stdout

    def is_mounted(self, path: str, fs_type: str) -> bool:
        """
        Check whether ``path`` is mounted with filesystem type ``fs_type``.

        A failed listing counts as "not mounted"; the caller decides whether to retry.
        """
        if path.endswith("/"):
            path = path[:-1]

        try:
            mounts = self.list_mounts()
        except CommandError as e:
            logger.warning(f"Could not list mounts: {e}")
            return False

        return f"on {path} type {fs_type}" in mounts
