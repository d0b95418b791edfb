"""Command-line interface for mados-wl.

Parses arguments, builds the backend once and hands it to WlManager,
which runs the requested operation.
"""

from .manager import WlManager
from .command import main

__all__ = ['WlManager', 'main']
