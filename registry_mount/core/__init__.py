"""
Core utilities: logging, shell execution and error types.
"""

from .logger import setup_logging, get_logger
from .shell_executor import run_command, check_command_available, CommandResult

__all__ = [
    "setup_logging",
    "get_logger",
    "run_command",
    "check_command_available",
    "CommandResult"
]
