#!/usr/bin/env python3
"""
Filer readiness checks over the filer's HTTP interface.
"""

import time

import requests

from registry_mount.core.logger import get_logger

logger = get_logger(__name__)

def filer_url(filer: str) -> str:
    """Base URL for a ``host:port`` filer address"""
    if filer.startswith(("http://", "https://")):
        return filer.rstrip("/") + "/"
    return f"http://{filer}/"

def is_filer_reachable(filer: str, timeout: float = 5) -> bool:
    """
    Test connection to the filer.

    Any answer below 500 counts: the filer root may list a directory
    or refuse access, either way the server is up.
    """
    url = filer_url(filer)
    try:
        response = requests.get(url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        logger.debug(f"Filer {url} not reachable: {e}")
        return False

    if response.status_code >= 500:
        logger.debug(f"Filer {url} answered {response.status_code}")
        return False
    return True

def wait_for_filer(filer: str, timeout: float, interval: float = 1.0) -> bool:
    """
    Poll the filer until it answers or ``timeout`` seconds pass.

    Returns:
        True once the filer answered
    """
    deadline = time.monotonic() + timeout
    attempt = 0

    while True:
        attempt += 1
        if is_filer_reachable(filer, timeout=min(5, max(timeout, 0.1))):
            logger.info(f"Filer {filer} reachable after {attempt} attempt(s)")
            return True
        if time.monotonic() + interval > deadline:
            break
        time.sleep(interval)

    logger.error(f"Filer {filer} not reachable within {timeout}s")
    return False
