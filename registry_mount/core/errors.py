"""
Error types raised while provisioning and tearing down registry storage.
"""

from typing import List, Optional


class RegistryMountError(Exception):
    """Base class for all registry mount failures"""


class ConfigurationError(RegistryMountError):
    """Invalid parameters; raised before any subprocess is launched"""


class TargetMissingError(ConfigurationError):
    """No mount path was given"""


class ResourceExhaustionError(RegistryMountError):
    """A cache directory could not be allocated"""


class CommandError(RegistryMountError):
    """A shell command exited non-zero or could not be started"""

    def __init__(self, command: str, returncode: Optional[int] = None, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"Command '{command}' failed (code {returncode}): {stderr}")


class CommandTimeoutError(CommandError):
    """A shell command exceeded its deadline and was killed"""

    def __init__(self, command: str, timeout: float):
        self.timeout = timeout
        super().__init__(command, None, f"timed out after {timeout}s")


class DriverError(RegistryMountError):
    """The mount helper exited non-zero"""

    def __init__(self, command: str, output: str = "", returncode: Optional[int] = None):
        self.command = command
        self.output = output
        self.returncode = returncode
        super().__init__(
            f"Mount helper failed (code {returncode}): {command}"
            + (f"\n{output}" if output else "")
        )


class MountNotConfirmedError(RegistryMountError):
    """The mount never showed up in the mount table"""


class FilerUnavailableError(RegistryMountError):
    """The filer did not answer before the readiness deadline"""


class TeardownError(RegistryMountError):
    """One or more teardown steps failed; every failure is kept in ``errors``"""

    def __init__(self, errors: List[Exception]):
        self.errors = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors))
