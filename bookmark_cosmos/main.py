#!/usr/bin/env python3
"""
Main entry point for Bookmark Cosmos.
"""

import sys
from bookmark_cosmos.cli import main


if __name__ == "__main__":
    sys.exit(main())
