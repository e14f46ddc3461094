#!/usr/bin/env python3
"""
Configuration loader for the registry mount supervisor.
Loads settings from a JSON options file and fills in defaults.
"""

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from registry_mount.core.errors import ConfigurationError
from registry_mount.core.logger import LOG_LEVELS, get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = "/etc/registry-mount/options.json"
CONFIG_PATH_ENV = "REGISTRY_MOUNT_CONFIG"

SUPPORTED_BACKENDS = ("swfs",)

@dataclass
class StorageConfig:
    """Backend selection and its opaque parameter blob"""
    type: str                          # backend selector, e.g. "swfs"
    mount_path: str                    # e.g. "/var/lib/registry"
    param: Dict[str, Any] = field(default_factory=dict)

@dataclass
class Config:
    """Main configuration"""
    storage: StorageConfig
    mount_helper: str                 # helper command prefix
    fs_type: str                      # type tag expected in the mount table
    cache_root: str                   # "" means the system temp dir
    poll_attempts: int                # mount table checks before giving up
    poll_interval: float              # seconds between checks
    mount_list_timeout: float         # deadline for one `mount` listing
    filer_wait_seconds: float         # 0 disables the filer readiness wait
    registry_command: str             # downstream registry process
    log_level: str
    log_file: str

class ConfigLoader:
    """Loads and validates configuration from the options file"""

    DEFAULT_CONFIG = {
        "storage": {
            "type": "swfs",
            "mountPath": "/var/lib/registry",
            "param": {
                "cache_capacity": 0,
                "filer": "filer:8888",
                "filer_path": "/registry",
                "volume_server_access": ""
            }
        },
        "mount_helper": "/usr/bin/weed mount",
        "fs_type": "fuse.seaweedfs",
        "cache_root": "",
        "poll_attempts": 3,
        "poll_interval": 0.5,
        "mount_list_timeout": 10,
        "filer_wait_seconds": 0,
        "registry_command": "/entrypoint.sh /etc/docker/registry/config.yml",
        "log_level": "INFO",
        "log_file": ""
    }

    @staticmethod
    def resolve_path(config_path: Optional[str] = None) -> str:
        return config_path or os.environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH

    @staticmethod
    def load(config_path: Optional[str] = None) -> Config:
        """
        Load configuration from the options file.

        A missing file means defaults only.

        Args:
            config_path: Path to the options file

        Returns:
            Config object with all settings

        Raises:
            ConfigurationError: If the file is not valid JSON or a value is invalid
        """
        config_path = ConfigLoader.resolve_path(config_path)
        user_config = ConfigLoader.get_raw_config(config_path)

        config_dict = copy.deepcopy(ConfigLoader.DEFAULT_CONFIG)
        storage_overrides = user_config.pop("storage", None) or {}
        config_dict.update(user_config)
        if not isinstance(storage_overrides, dict):
            raise ConfigurationError(f"'storage' must be an object, got {storage_overrides!r}")
        config_dict["storage"].update(storage_overrides)

        config = ConfigLoader._create_config(config_dict)
        logger.debug(f"Configuration loaded from {config_path}")
        return config

    @staticmethod
    def get_raw_config(config_path: str) -> dict:
        """
        Read the options file as a dictionary; {} when it does not exist.

        Raises:
            ConfigurationError: If the file is not a JSON object
        """
        config_file = Path(config_path)

        if not config_file.exists():
            logger.warning(f"Config file not found at {config_path}, using defaults")
            return {}

        try:
            with open(config_file, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a JSON object")
        return data

    @staticmethod
    def _create_config(config_dict: dict) -> Config:
        """Create Config object from dictionary with validation"""
        storage = config_dict["storage"]
        try:
            config = Config(
                storage=StorageConfig(
                    type=str(storage.get("type", "")),
                    mount_path=str(storage.get("mountPath", "")),
                    param=storage.get("param") or {}
                ),
                mount_helper=str(config_dict["mount_helper"]),
                fs_type=str(config_dict["fs_type"]),
                cache_root=str(config_dict["cache_root"] or ""),
                poll_attempts=int(config_dict["poll_attempts"]),
                poll_interval=float(config_dict["poll_interval"]),
                mount_list_timeout=float(config_dict["mount_list_timeout"]),
                filer_wait_seconds=float(config_dict["filer_wait_seconds"]),
                registry_command=str(config_dict["registry_command"]),
                log_level=str(config_dict["log_level"]),
                log_file=str(config_dict["log_file"] or "")
            )
        except (ValueError, TypeError) as e:
            raise ConfigurationError(f"Invalid configuration value: {e}") from e

        ConfigLoader._validate_config(config)
        return config

    @staticmethod
    def _validate_config(config: Config) -> None:
        """Validate configuration values"""
        errors = []

        if config.storage.type not in SUPPORTED_BACKENDS:
            errors.append(
                f"storage.type must be one of {list(SUPPORTED_BACKENDS)}, got '{config.storage.type}'"
            )

        if not config.storage.mount_path:
            errors.append("storage.mountPath must not be empty")

        if not isinstance(config.storage.param, (dict, str)):
            errors.append("storage.param must be an object or a JSON string")

        if not config.mount_helper.strip():
            errors.append("mount_helper must not be empty")

        if config.poll_attempts < 1:
            errors.append(f"poll_attempts must be >= 1, got {config.poll_attempts}")

        if config.poll_interval < 0:
            errors.append(f"poll_interval must be >= 0, got {config.poll_interval}")

        if config.mount_list_timeout <= 0:
            errors.append(f"mount_list_timeout must be > 0, got {config.mount_list_timeout}")

        if config.filer_wait_seconds < 0:
            errors.append(f"filer_wait_seconds must be >= 0, got {config.filer_wait_seconds}")

        if config.log_level.upper() not in LOG_LEVELS:
            errors.append(f"log_level must be one of {sorted(LOG_LEVELS)}, got {config.log_level}")

        if errors:
            error_msg = "; ".join(errors)
            logger.error(f"Configuration validation failed: {error_msg}")
            raise ConfigurationError(f"Invalid configuration: {error_msg}")
