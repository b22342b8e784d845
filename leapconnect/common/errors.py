"""Error taxonomy for install/uninstall orchestration"""

from __future__ import annotations


class LeapConnectError(Exception):
    """Base class for all operator-facing failures"""


class PrivilegeError(LeapConnectError):
    """Required elevated rights are absent"""


class ValidationError(LeapConnectError):
    """Malformed input, or a field required by the selected mode is missing"""


class ResolutionError(LeapConnectError):
    """Binary, user identity or home directory could not be resolved"""


class TemplateError(LeapConnectError):
    """A unit template source is unavailable"""


class OperationalError(LeapConnectError):
    """A supervisor call returned non-zero"""

    def __init__(self, command: list[str], returncode: int) -> None:
        """
        Record the failing command line and its exit status.

        Args:
            command:
                Full argv that was executed.
            returncode:
                Exit status returned by the command.
        """
        self.command: list[str] = list(command)
        self.returncode: int = returncode
        super().__init__(f"'{' '.join(self.command)}' exited with status {returncode}")
