"""
Storage module: mounting, verification and teardown of the registry backend.
"""

from .factory import new_storage, build_orchestrator
from .models import MountParameters, MountVerdict, VerdictKind
from .mount_orchestrator import MountOrchestrator
from .mount_table import MountTable
from .seaweed_driver import SeaweedDriver
from .storage_handle import StorageHandle

__all__ = [
    "new_storage",
    "build_orchestrator",
    "MountParameters",
    "MountVerdict",
    "VerdictKind",
    "MountOrchestrator",
    "MountTable",
    "SeaweedDriver",
    "StorageHandle"
]
