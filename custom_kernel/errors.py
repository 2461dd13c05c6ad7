"""
Error types.

Every failure the tool reports to the operator is a CustomKernelError
carrying a message, an optional remediation hint and the process exit code.
"""

from typing import Optional


class CustomKernelError(Exception):
    """
    Base class for reported failures.

    Attributes:
        message: What went wrong
        hint: How to fix it (may be None)
        exit_code: Process exit code for this failure
    """
    exit_code = 1

    def __init__(self, message: str, hint: Optional[str] = None):
        self.message = message
        self.hint = hint
        super().__init__(message)


class ConfigError(CustomKernelError):
    """Configuration missing, incomplete or pointing at nonexistent paths."""


class InventoryError(CustomKernelError):
    """Boot directory could not be scanned or holds no kernels."""


class SelectionError(CustomKernelError):
    """Custom kernel link is malformed or missing where one is required."""


class SelectionAborted(CustomKernelError):
    """Operator declined to choose a kernel."""


class PrivilegeError(CustomKernelError):
    """Mutating operation requested without root privileges."""
    exit_code = -1


class LinkUpdateError(CustomKernelError):
    """
    A step of the link/copy sequence failed.

    Attributes:
        step: Description of the failed action
    """
    exit_code = -2

    def __init__(self, message: str, step: Optional[str] = None, hint: Optional[str] = None):
        self.step = step
        super().__init__(message, hint)
