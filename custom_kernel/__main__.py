"""
Entry point for running custom_kernel as a module.

Usage:
    python -m custom_kernel [options]
"""

import sys
from custom_kernel.cli import main

if __name__ == "__main__":
    sys.exit(main())
