#!/usr/bin/env python3
"""
Launcher for the image registry process.
Runs it in the foreground and forwards shutdown signals to it.
"""

import signal
import subprocess
from typing import Optional

from registry_mount.core.logger import get_logger

logger = get_logger(__name__)

FORWARDED_SIGNALS = (signal.SIGTERM, signal.SIGINT)

class RegistryLauncher:
    """Runs the registry command until it exits"""

    def __init__(self, command: str):
        self.command = command
        self.process: Optional[subprocess.Popen] = None

    def run(self) -> int:
        """
        Start the registry with inherited stdout/stderr and wait for it.

        SIGTERM and SIGINT received meanwhile are passed on to the registry.

        Returns:
            Registry exit status (127 if it could not be started)
        """
        logger.info(f"Starting registry: {self.command}")

        try:
            self.process = subprocess.Popen(["/bin/sh", "-c", self.command])
        except OSError as e:
            logger.error(f"Failed to start registry: {e}")
            return 127

        previous = {sig: signal.signal(sig, self._forward) for sig in FORWARDED_SIGNALS}
        try:
            returncode = self.process.wait()
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)

        if returncode != 0:
            logger.error(f"Registry exited with code {returncode}")
        else:
            logger.info("Registry exited")
        return returncode

    def _forward(self, signum, frame) -> None:
        if self.process and self.process.poll() is None:
            logger.info(f"Forwarding signal {signal.Signals(signum).name} to registry")
            self.process.send_signal(signum)
