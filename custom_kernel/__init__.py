"""
custom-kernel - Custom Kernel Manager for kernelstub systems

Selects an installed kernel as the "custom" boot kernel, advances it to
the next installed version after kernel upgrades and mirrors it onto the
EFI System Partition.
"""

__version__ = "0.1.0"
__author__ = "custom-kernel Contributors"
__license__ = "MIT"

from .cli import main

__all__ = ["main"]
