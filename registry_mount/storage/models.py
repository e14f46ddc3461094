#!/usr/bin/env python3
"""
Data structures shared by the mount driver, orchestrator and storage handle.
"""

import json
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional, Union

from registry_mount.core.errors import ConfigurationError, RegistryMountError

@dataclass
class MountParameters:
    """
    Mount helper parameters, the ``param`` blob of the storage config.

    ``cache_path`` is output-only: the driver writes the allocated cache
    directory into it before launching the helper. No other field changes
    after the parameters are handed to the driver.
    """
    filer: str
    filer_path: str = ""
    cache_capacity: int = 0            # MB, must be >= 0
    volume_server_access: str = ""     # e.g. "direct", "publicUrl", "filerProxy"
    cache_path: str = ""

    @classmethod
    def from_param(cls, param: Union[str, bytes, Dict[str, Any]]) -> "MountParameters":
        """
        Decode the ``param`` blob (JSON text or an already parsed dict).

        Raises:
            ConfigurationError: If the blob is not a JSON object or a field has the wrong type
        """
        if isinstance(param, (str, bytes)):
            try:
                param = json.loads(param)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid storage param JSON: {e}") from e

        if not isinstance(param, dict):
            raise ConfigurationError(f"Storage param must be a JSON object, got {type(param).__name__}")

        try:
            capacity = param.get("cache_capacity", 0)
            if isinstance(capacity, bool) or not isinstance(capacity, int):
                raise TypeError(f"cache_capacity must be an integer, got {capacity!r}")
            return cls(
                filer=str(param.get("filer", "")),
                filer_path=str(param.get("filer_path", "") or ""),
                cache_capacity=capacity,
                volume_server_access=str(param.get("volume_server_access", "") or ""),
                cache_path=str(param.get("cache_path", "") or "")
            )
        except TypeError as e:
            raise ConfigurationError(f"Invalid storage param: {e}") from e

    def to_param(self) -> Dict[str, Any]:
        return asdict(self)

class VerdictKind(Enum):
    SUCCEEDED = "succeeded"
    TIMED_OUT = "timed_out"
    DRIVER_FAILED = "driver_failed"

@dataclass
class MountVerdict:
    """Outcome of one mount attempt, published once by the poll task"""
    kind: VerdictKind
    error: Optional[RegistryMountError] = None

    @property
    def succeeded(self) -> bool:
        return self.kind is VerdictKind.SUCCEEDED
