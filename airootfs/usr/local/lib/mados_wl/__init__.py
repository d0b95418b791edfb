"""madOS WL - WiFi management from the command line.

A thin front end for NetworkManager: every radio and network operation is
delegated to nmcli, invoked as a subprocess.  Backends implement the
WlBackend interface, so callers never depend on nmcli directly.

Usage:
    from mados_wl import create_backend, ScanOptions

    backend = create_backend()
    print(backend.scan(ScanOptions(min_strength=40)).decode())
"""

__version__ = "1.0.0"
__app_id__ = "mados-wl"

from .errors import (
    WlError,
    ErrorKind,
    NetworkAdapterError,
    InvalidSignalStrength,
    SelectionError,
    PasswordReadError,
    OutputError,
)
from .interfaces import (
    CARRIAGE_RETURN,
    LINE_FEED,
    LOOPBACK_INTERFACE_NAME,
    ScanOptions,
    WlBackend,
    parse_decimal,
    split_fields,
    split_lines,
    unescape_field,
)
from .nmcli import NmcliBackend
from .factory import create_backend

__all__ = [
    '__version__',
    '__app_id__',
    'WlError',
    'ErrorKind',
    'NetworkAdapterError',
    'InvalidSignalStrength',
    'SelectionError',
    'PasswordReadError',
    'OutputError',
    'CARRIAGE_RETURN',
    'LINE_FEED',
    'LOOPBACK_INTERFACE_NAME',
    'ScanOptions',
    'WlBackend',
    'parse_decimal',
    'split_fields',
    'split_lines',
    'unescape_field',
    'NmcliBackend',
    'create_backend',
]
