#!/usr/bin/env python3
"""
Mount driver for the SeaweedFS FUSE client.
Builds the ``weed mount`` command line and runs it.
"""

import shlex
from typing import Optional

from registry_mount.core.errors import (
    ConfigurationError,
    DriverError,
    ResourceExhaustionError,
    TargetMissingError,
)
from registry_mount.core.logger import get_logger
from registry_mount.core.shell_executor import run_command

from .cache_allocator import allocate_cache_dir
from .models import MountParameters

logger = get_logger(__name__)

class SeaweedDriver:
    """Launches the mount helper for one mount path"""

    DEFAULT_MOUNT_HELPER = "/usr/bin/weed mount"
    # Helper output kept for DriverError; the rest only goes to the log
    OUTPUT_TAIL_LINES = 200

    def __init__(
        self,
        mount_helper: str = DEFAULT_MOUNT_HELPER,
        cache_root: Optional[str] = None
    ):
        self.mount_helper = mount_helper
        self.cache_root = cache_root or None

    def validate(self, path: str, params: MountParameters) -> None:
        """
        Check parameters without touching the system.

        Raises:
            ConfigurationError: If cache capacity is negative
            TargetMissingError: If path is empty
        """
        if params.cache_capacity < 0:
            raise ConfigurationError(
                f"cache_capacity must be >= 0, got {params.cache_capacity}"
            )
        if not path:
            raise TargetMissingError("Mount path is empty")

    def build_command(self, path: str, params: MountParameters) -> str:
        """Compose the helper command line; optional flags are left out when empty"""
        quote = shlex.quote
        command = f"{self.mount_helper} -filer={quote(params.filer)}"
        command += f" -cacheCapacityMB={params.cache_capacity}"
        command += f" -cacheDir={quote(params.cache_path)}"

        if params.volume_server_access:
            command += f" -volumeServerAccess={quote(params.volume_server_access)}"

        command += f" -dir={quote(path)}"

        if params.filer_path:
            command += f" -filer.path={quote(params.filer_path)}"

        return command

    def mount(self, path: str, params: MountParameters) -> None:
        """
        Allocate a cache directory and run the mount helper.

        Blocks until the helper exits, which may be never for a helper
        that stays in the foreground.

        Args:
            path: Mount target
            params: Helper parameters; ``cache_path`` is filled in here

        Raises:
            ConfigurationError: Invalid parameters, nothing launched
            ResourceExhaustionError: No cache directory could be created
            DriverError: The helper exited non-zero
        """
        self.validate(path, params)

        cache_dir = allocate_cache_dir(self.cache_root)
        if not cache_dir:
            raise ResourceExhaustionError("Could not create temp cache dir")
        params.cache_path = cache_dir

        command = self.build_command(path, params)
        logger.info(f"Mount command: {command}")

        result = run_command(command, tail_lines=self.OUTPUT_TAIL_LINES)
        if not result.success:
            logger.error(f"Mount helper exec failed: {command}")
            raise DriverError(command, result.stderr, result.returncode)

        logger.info(f"Mount helper exited: {result.stdout}")
