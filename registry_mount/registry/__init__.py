"""
Downstream registry process management.
"""

from .launcher import RegistryLauncher

__all__ = ["RegistryLauncher"]
