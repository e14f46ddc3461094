#!/usr/bin/env python3
"""
Container entrypoint.
Mounts the registry storage, runs the registry, and tears the mount down
when the registry exits.
"""

import sys
from typing import Optional

from registry_mount.config.loader import ConfigLoader
from registry_mount.core.errors import RegistryMountError, TeardownError
from registry_mount.core.logger import get_logger, setup_logging
from registry_mount.registry.launcher import RegistryLauncher
from registry_mount.storage import new_storage

logger = get_logger(__name__)

def run(config_path: Optional[str] = None) -> int:
    """
    Full lifecycle: config, storage, registry, teardown.

    Returns:
        Process exit status; 1 on any storage initialization failure
    """
    try:
        config = ConfigLoader.load(config_path)
    except RegistryMountError as e:
        setup_logging()
        logger.critical(f"Configuration error: {e}")
        return 1

    setup_logging(config.log_level, config.log_file or None)
    logger.info("=" * 60)
    logger.info("Starting registry storage supervisor")
    logger.info("=" * 60)

    try:
        storage = new_storage(config)
    except RegistryMountError as e:
        logger.critical(f"Storage initialization failed: {e}")
        return 1

    exit_code = 1
    try:
        exit_code = RegistryLauncher(config.registry_command).run()
    finally:
        logger.info(f"Tearing down storage at {storage.mount_path}")
        try:
            storage.teardown()
        except TeardownError as e:
            logger.error(f"Storage teardown failed: {e}")
            exit_code = exit_code or 1

    return 0 if exit_code == 0 else 1

def main():
    """Main entry point"""
    sys.exit(run())

if __name__ == "__main__":
    main()
