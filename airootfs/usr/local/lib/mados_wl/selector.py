"""madOS WL - Interactive SSID selection.

When the caller omits an SSID, a numbered menu is built from the backend's
output, written to the output stream, and the user's answer is read from
the input stream and resolved against the menu.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .config import SCAN_MENU_FIELDS
from .errors import SelectionError
from .interfaces import (
    LINE_FEED,
    LOOPBACK_INTERFACE_NAME,
    ScanOptions,
    WlBackend,
    parse_decimal,
    split_fields,
    split_lines,
    unescape_field,
)
from .output import write_bytes

logger = logging.getLogger(__name__)

DISCONNECT_CUE = b'Select the SSID to disconnect: '
CONNECT_CUE = b'Select the SSID to connect: '

# (ssid, extra text shown after it or None)
MenuEntry = Tuple[bytes, Optional[bytes]]


def active_ssid_candidates(raw: bytes, separator: bytes) -> List[bytes]:
    """Return the active SSIDs, skipping blank lines and the loopback entry.

    Names are unescaped, so they can be passed back to the backend as is.
    """
    names = [unescape_field(line, separator) for line in split_lines(raw)]
    return [name for name in names if name and name != LOOPBACK_INTERFACE_NAME]


def scan_candidates(raw: bytes, separator: bytes) -> List[Tuple[bytes, bytes]]:
    """Parse terse ``SSID<sep>SIGNAL`` scan output into ``(ssid, signal)`` pairs.

    Hidden networks have an empty SSID and cannot be selected by name, so
    they are left out.
    """
    candidates = []
    for line in split_lines(raw):
        if not line:
            continue
        fields = split_fields(line, separator)
        if len(fields) < 2 or not fields[0]:
            continue
        candidates.append((fields[0], fields[1]))
    return candidates


def build_menu(entries: Iterable[MenuEntry]) -> Tuple[bytes, Dict[int, bytes]]:
    """Number the entries from 0 and return the menu text and selection map."""
    lines = bytearray()
    selection: Dict[int, bytes] = {}
    for idx, (ssid, signal) in enumerate(entries):
        lines += b'(' + str(idx).encode() + b') ' + ssid
        if signal is not None:
            lines += b' (sig: ' + signal + b')'
        lines += LINE_FEED
        selection[idx] = ssid
    return bytes(lines), selection


def ask_selection(menu: bytes, selection: Dict[int, bytes], cue: bytes,
                  stdin, stdout) -> bytes:
    """Show ``menu`` and ``cue``, read one answer and resolve it.

    Raises:
        SelectionError: If the answer cannot be read, is not a
            non-negative integer, or matches no entry.
    """
    write_bytes(stdout, menu + cue)

    try:
        answer = stdin.readline()
    except (OSError, UnicodeDecodeError) as exc:
        raise SelectionError(str(exc)) from exc
    if isinstance(answer, bytes):
        answer = answer.decode('utf-8', errors='replace')

    try:
        choice = parse_decimal(answer.strip().encode('utf-8'))
    except ValueError as exc:
        raise SelectionError(str(exc)) from exc

    if choice not in selection:
        logger.debug('Selection %d is not in the menu', choice)
        raise SelectionError()
    return selection[choice]


def select_active_ssid(backend: WlBackend, stdin, stdout) -> bytes:
    """Let the user pick one of the active connections."""
    candidates = active_ssid_candidates(
        backend.get_active_ssids(), backend.get_field_separator()
    )
    menu, selection = build_menu((ssid, None) for ssid in candidates)
    return ask_selection(menu, selection, DISCONNECT_CUE, stdin, stdout)


def select_scanned_ssid(backend: WlBackend, stdin, stdout) -> bytes:
    """Rescan and let the user pick one of the networks in range."""
    options = ScanOptions(min_strength=0, re_scan=True, terse_fields=SCAN_MENU_FIELDS)
    raw = backend.scan(options)
    candidates = scan_candidates(raw, backend.get_field_separator())
    menu, selection = build_menu(candidates)
    return ask_selection(menu, selection, CONNECT_CUE, stdin, stdout)
