#!/usr/bin/env python3
"""madOS WL - Entry point."""

import sys

from .cli import main

if __name__ == '__main__':
    sys.exit(main())
