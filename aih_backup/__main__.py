#!/usr/bin/env python3
"""
Command-line entry point, so the package can be run with ``python -m aih_backup``.
"""

import sys
from .cli import app


if __name__ == "__main__":
    try:
        app(prog_name="aih-backup")
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        sys.exit(1)
