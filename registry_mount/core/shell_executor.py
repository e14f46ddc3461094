#!/usr/bin/env python3
"""
Shell command execution utilities.
Used for running system commands like mount, umount and the mount helper.
"""

import os
import signal
import subprocess
from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional

from .logger import get_logger

logger = get_logger(__name__)

@dataclass
class CommandResult:
    """Outcome of a single shell command"""
    success: bool
    stdout: str = ""
    stderr: str = ""
    returncode: Optional[int] = None
    timed_out: bool = False

def run_command(
    command: str,
    timeout: Optional[float] = None,
    tail_lines: Optional[int] = None
) -> CommandResult:
    """
    Execute a command line through /bin/sh.

    The child runs in its own session so that on timeout the whole
    process group is killed, not only the shell. Output that is not valid
    UTF-8 (mount paths are raw bytes) is kept with surrogate escapes.

    With ``tail_lines`` set, stdout and stderr are merged and streamed to
    the log line by line while the command runs, and only the last
    ``tail_lines`` lines are kept. Use it for long-lived commands whose
    output would otherwise pile up until exit; ``timeout`` is not
    supported in that mode.

    Args:
        command: Shell command line
        timeout: Deadline in seconds, or None to wait for exit
        tail_lines: Stream output and keep only this many trailing lines

    Returns:
        CommandResult; stdout is empty unless the command exited zero
    """
    if tail_lines is not None and timeout is not None:
        raise ValueError("timeout is not supported together with tail_lines")

    logger.debug(f"Running command: {command}")

    try:
        process = subprocess.Popen(
            ["/bin/sh", "-c", command],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if tail_lines is not None else subprocess.PIPE,
            text=True,
            errors="surrogateescape",
            start_new_session=True
        )
    except OSError as e:
        logger.error(f"Command execution error: {e}")
        return CommandResult(success=False, stderr=str(e))

    if tail_lines is not None:
        return _stream_output(process, command, tail_lines)

    try:
        stdout, stderr = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        _kill_group(process)
        process.communicate()
        logger.error(f"Command timed out after {timeout}s: {command}")
        return CommandResult(
            success=False,
            stderr=f"timed out after {timeout}s",
            returncode=process.returncode,
            timed_out=True
        )

    stdout = stdout.strip() if stdout else ""
    stderr = stderr.strip() if stderr else ""

    if stderr:
        logger.debug(f"Command stderr: {stderr}")

    if process.returncode != 0:
        logger.debug(f"Command failed with code {process.returncode}: {command}")
        return CommandResult(
            success=False,
            stdout="",
            stderr=stderr or stdout,
            returncode=process.returncode
        )

    return CommandResult(success=True, stdout=stdout, stderr=stderr, returncode=0)

def _stream_output(process: subprocess.Popen, command: str, tail_lines: int) -> CommandResult:
    name = command.split()[0] if command.split() else "sh"
    tail: Deque[str] = deque(maxlen=tail_lines)

    for line in process.stdout:
        line = line.rstrip("\n")
        logger.debug(f"[{name}] {line}")
        tail.append(line)

    process.stdout.close()
    returncode = process.wait()
    output = "\n".join(tail).strip()

    if returncode != 0:
        logger.debug(f"Command failed with code {returncode}: {command}")
        return CommandResult(success=False, stderr=output, returncode=returncode)

    return CommandResult(success=True, stdout=output, returncode=0)

def _kill_group(process: subprocess.Popen) -> None:
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass

def check_command_available(command: str) -> bool:
    """
    Check if a command is available in the system.

    Args:
        command: Command name to check

    Returns:
        True if command exists
    """
    result = run_command(f"command -v {command}", timeout=5)
    return result.success
