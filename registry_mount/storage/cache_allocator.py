#!/usr/bin/env python3
"""
Allocation of uniquely named local cache directories for the mount helper.
"""

import os
import random
import shutil
import string
import tempfile
from typing import Optional

from registry_mount.core.logger import get_logger

logger = get_logger(__name__)

LETTERS = string.ascii_letters
SUFFIX_LENGTH = 10
MAX_ATTEMPTS = 100

# Seeded once per process
_random = random.Random()

def random_suffix(length: int = SUFFIX_LENGTH) -> str:
    """Random name of ``length`` ASCII letters"""
    return "".join(_random.choice(LETTERS) for _ in range(length))

def allocate_cache_dir(
    root: Optional[str] = None,
    attempts: int = MAX_ATTEMPTS
) -> str:
    """
    Create a fresh cache directory under ``root`` (system temp dir by default).

    ``os.mkdir`` fails when the name exists, so concurrent allocators never
    get the same directory.

    Args:
        root: Parent directory
        attempts: Number of names to try

    Returns:
        Absolute path of the created directory, or "" if every attempt failed
    """
    root = root or tempfile.gettempdir()

    for attempt in range(attempts):
        path = os.path.join(root, random_suffix())
        try:
            os.mkdir(path, 0o755)
        except OSError as e:
            logger.debug(f"Cache dir attempt {attempt + 1} failed for {path}: {e}")
            continue

        logger.debug(f"Allocated cache dir {path}")
        return os.path.abspath(path)

    logger.error(f"Could not allocate a cache dir under {root} after {attempts} attempts")
    return ""

def release_cache_dir(path: str) -> bool:
    """
    Remove a cache directory that no handle owns.

    Failures are logged, not raised: the caller is already reporting the
    error that left the directory orphaned.

    Returns:
        True if the directory is gone afterwards
    """
    if not path or not os.path.lexists(path):
        return True

    try:
        shutil.rmtree(path)
    except OSError as e:
        logger.error(f"Could not remove orphaned cache dir {path}: {e}")
        return False

    logger.info(f"Removed orphaned cache dir {path}")
    return True
