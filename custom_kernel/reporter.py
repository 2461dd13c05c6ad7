"""
Output reporting module.

All operator-facing output goes through the Reporter, which applies the
configured verbosity. Errors are always shown.
"""

import sys
from enum import Enum
from typing import List

from .errors import CustomKernelError
from .linker import LinkAction


class OutputLevel(Enum):
    """Output verbosity levels."""
    QUIET = 0
    NORMAL = 1
    VERBOSE = 2


class Reporter:
    """
    Handles formatted output for custom-kernel operations.
    """

    def __init__(self, level: OutputLevel = OutputLevel.NORMAL):
        """
        Initialize the reporter.

        Args:
            level: Output verbosity level
        """
        self.level = level

    @property
    def verbose(self) -> bool:
        return self.level == OutputLevel.VERBOSE

    def info(self, message: str) -> None:
        """Print a message unless quiet."""
        if self.level == OutputLevel.QUIET:
            return
        print(message)

    def detail(self, message: str) -> None:
        """Print a message in verbose mode only."""
        if self.verbose:
            print(message)

    def print_current_kernel(self, current: str) -> None:
        self.info(f"\nCurrent custom kernel: {current}")

    def print_new_kernel(self, version: str) -> None:
        self.info(f"\nThe new custom kernel is: {version}\n")

    def print_no_next_kernel(self, current: str) -> None:
        self.info(f"\nNo next kernel found for current custom kernel: {current}\n")

    def print_family(self, pattern: str, family: List[str]) -> None:
        """Show the version family used for the next-version search."""
        self.detail(f"Version family pattern: {pattern}")
        self.detail(f"Kernels in family: {', '.join(family) if family else '(none)'}")

    def print_action(self, action: LinkAction, dry_run: bool = False) -> None:
        """
        Print a filesystem action before it is performed.

        Args:
            action: Action to describe
            dry_run: Whether this is a dry run
        """
        self.print_command(action.describe(), dry_run)

    def print_command(self, description: str, dry_run: bool = False) -> None:
        if dry_run:
            self.info(f"Dry run: {description}")
        else:
            self.detail(f"Executing: {description}")

    def print_error(self, error: CustomKernelError) -> None:
        """
        Print an error and its remediation hint to stderr.

        Args:
            error: The failure to report
        """
        print(f"\nError: {error.message}", file=sys.stderr)
        step = getattr(error, "step", None)
        if step:
            print(f"Failed step: {step}", file=sys.stderr)
        if error.hint:
            print(error.hint, file=sys.stderr)
        print(file=sys.stderr)

    def print_completion(self, dry_run: bool) -> None:
        """Print the closing line of a successful run."""
        if dry_run:
            self.info("\nThis was a dry run. No changes were made.\n")
        else:
            self.info("\nAll operations completed successfully.\n")
