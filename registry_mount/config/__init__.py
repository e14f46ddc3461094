"""
Configuration loading.
"""

from .loader import Config, ConfigLoader, StorageConfig

__all__ = ["Config", "ConfigLoader", "StorageConfig"]
