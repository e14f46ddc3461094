#!/usr/bin/env python3
"""
Mount orchestrator.

Runs the mount driver and a mount-table poll loop side by side and takes
its verdict from the poll loop alone: the helper may stay resident forever,
so the driver thread is never joined.
"""

import queue
import threading
import time
from typing import Optional

from registry_mount.core.errors import MountNotConfirmedError, RegistryMountError
from registry_mount.core.logger import get_logger

from .cache_allocator import release_cache_dir
from .models import MountParameters, MountVerdict, VerdictKind
from .mount_table import MountTable
from .seaweed_driver import SeaweedDriver
from .storage_handle import StorageHandle

logger = get_logger(__name__)

class _DriverOutcome:
    """What the background driver thread ended with, if it ended"""

    def __init__(self):
        self.finished = threading.Event()
        self.error: Optional[RegistryMountError] = None

class MountOrchestrator:
    """Mounts a path and confirms it against the mount table"""

    DEFAULT_FS_TYPE = "fuse.seaweedfs"
    DEFAULT_POLL_ATTEMPTS = 3
    DEFAULT_POLL_INTERVAL = 0.5

    def __init__(
        self,
        driver: Optional[SeaweedDriver] = None,
        mount_table: Optional[MountTable] = None,
        fs_type: str = DEFAULT_FS_TYPE,
        poll_attempts: int = DEFAULT_POLL_ATTEMPTS,
        poll_interval: float = DEFAULT_POLL_INTERVAL
    ):
        self.driver = driver or SeaweedDriver()
        self.mount_table = mount_table or MountTable()
        self.fs_type = fs_type
        self.poll_attempts = poll_attempts
        self.poll_interval = poll_interval

    def establish_mount(self, path: str, params: MountParameters) -> StorageHandle:
        """
        Mount ``path`` and return a handle once the mount table shows it.

        Worst case this waits ``poll_attempts * poll_interval`` plus the
        listing time of each poll.

        Raises:
            ConfigurationError: Invalid parameters (nothing launched)
            MountNotConfirmedError: The mount never appeared; chained to the
                driver error when the driver had already failed
        """
        self.driver.validate(path, params)

        verdicts: "queue.Queue[MountVerdict]" = queue.Queue(maxsize=1)
        outcome = _DriverOutcome()

        threading.Thread(
            target=self._run_driver,
            args=(path, params, outcome),
            name=f"MountDriver-{path}",
            daemon=True
        ).start()

        threading.Thread(
            target=self._poll_mount_table,
            args=(path, outcome, verdicts),
            name=f"MountPoller-{path}",
            daemon=True
        ).start()

        verdict = verdicts.get()

        if verdict.succeeded:
            logger.info(f"Mount confirmed at {path} ({self.fs_type})")
            return StorageHandle(path, params)

        # No handle will own the cache dir the driver may have allocated
        release_cache_dir(params.cache_path)

        message = f"Mount not confirmed at {path} after {self.poll_attempts} checks"
        if verdict.kind is VerdictKind.DRIVER_FAILED:
            raise MountNotConfirmedError(f"{message}: {verdict.error}") from verdict.error
        raise MountNotConfirmedError(message)

    def _run_driver(self, path: str, params: MountParameters, outcome: _DriverOutcome) -> None:
        try:
            self.driver.mount(path, params)
            logger.info(f"Mount helper for {path} exited cleanly")
        except RegistryMountError as e:
            outcome.error = e
            # The caller already has (or will get) its verdict from the poll loop
            logger.error(f"Mount driver error for {path}: {e}")
        finally:
            outcome.finished.set()

    def _poll_mount_table(
        self,
        path: str,
        outcome: _DriverOutcome,
        verdicts: "queue.Queue[MountVerdict]"
    ) -> None:
        # Always publish: establish_mount waits on this queue without a timeout
        verdict = MountVerdict(VerdictKind.TIMED_OUT)
        try:
            for attempt in range(self.poll_attempts):
                time.sleep(self.poll_interval)
                if self.mount_table.is_mounted(path, self.fs_type):
                    logger.debug(f"Mount seen on check {attempt + 1}")
                    verdict = MountVerdict(VerdictKind.SUCCEEDED)
                    return
                logger.debug(f"Mount not seen on check {attempt + 1}/{self.poll_attempts}")

            if outcome.finished.is_set() and outcome.error is not None:
                verdict = MountVerdict(VerdictKind.DRIVER_FAILED, outcome.error)
        except Exception as e:
            logger.error(f"Mount table check for {path} failed: {e}", exc_info=True)
        finally:
            verdicts.put(verdict)
