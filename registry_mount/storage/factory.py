#!/usr/bin/env python3
"""
Builds a live storage handle from configuration.
"""

from registry_mount.config.loader import SUPPORTED_BACKENDS, Config
from registry_mount.core.errors import ConfigurationError, FilerUnavailableError
from registry_mount.core.logger import get_logger

from .filer_probe import wait_for_filer
from .models import MountParameters
from .mount_orchestrator import MountOrchestrator
from .mount_table import MountTable
from .seaweed_driver import SeaweedDriver
from .storage_handle import StorageHandle

logger = get_logger(__name__)

def build_orchestrator(config: Config) -> MountOrchestrator:
    """Wire driver, mount table and poll policy from configuration"""
    return MountOrchestrator(
        driver=SeaweedDriver(
            mount_helper=config.mount_helper,
            cache_root=config.cache_root or None
        ),
        mount_table=MountTable(timeout=config.mount_list_timeout),
        fs_type=config.fs_type,
        poll_attempts=config.poll_attempts,
        poll_interval=config.poll_interval
    )

def new_storage(config: Config) -> StorageHandle:
    """
    Mount the configured backend and return its handle.

    Raises:
        ConfigurationError: Unsupported backend or bad parameters
        FilerUnavailableError: Filer did not answer within filer_wait_seconds
        MountNotConfirmedError: Mount never appeared in the mount table
    """
    storage = config.storage
    if storage.type not in SUPPORTED_BACKENDS:
        raise ConfigurationError(f"Unsupported storage type: '{storage.type}'")

    params = MountParameters.from_param(storage.param)

    if config.filer_wait_seconds > 0:
        if not wait_for_filer(params.filer, config.filer_wait_seconds):
            raise FilerUnavailableError(
                f"Filer {params.filer} not reachable within {config.filer_wait_seconds}s"
            )

    logger.info(f"Mounting {params.filer}{params.filer_path} at {storage.mount_path}")
    handle = build_orchestrator(config).establish_mount(storage.mount_path, params)
    logger.info(f"Storage ready at {handle.mount_path}, cache dir {handle.cache_dir}")
    return handle
