#!/usr/bin/env python3
"""
Main entry point for the bookmark archiver when run as a script.
"""

import sys
from bookmark_archiver.cli import main


if __name__ == "__main__":
    sys.exit(main())
