"""madOS WL - Abstract interfaces.

Defines the contract every network backend implements, so that the
command-line front end can be driven by nmcli in production and by an
in-memory backend in tests.

Backends return raw byte streams.  The format differs per operation and is
stated in each method's docstring: *human-readable* output carries no
structure and must be forwarded verbatim, *terse* output is one record per
line with fields delimited by :meth:`WlBackend.get_field_separator`.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


# ---------------------------------------------------------------------------
# Byte-stream conventions
# ---------------------------------------------------------------------------

LINE_FEED = b'\n'

# Some programs end lines with CR LF; the CR is stripped per line.
CARRIAGE_RETURN = b'\r'

# Network backends may list the loopback interface among active connections.
LOOPBACK_INTERFACE_NAME = b'lo'

_ESCAPE = b'\\'


def split_lines(data: bytes) -> List[bytes]:
    """Split a byte stream into lines.

    Lines are delimited by LF; a CR right before the LF is dropped.  The
    empty element produced by a trailing LF is not returned, so the result
    holds exactly one item per record.
    """
    if not data:
        return []
    lines = data.split(LINE_FEED)
    if data.endswith(LINE_FEED):
        lines.pop()
    return [line[:-1] if line.endswith(CARRIAGE_RETURN) else line for line in lines]


def split_fields(line: bytes, separator: bytes) -> List[bytes]:
    """Split a terse-mode line on unescaped separators.

    nmcli escapes a literal separator inside a value as ``\\:`` and a
    literal backslash as ``\\\\``.  Splitting only happens on unescaped
    separators and the escapes are removed from the resulting fields.

    Args:
        line: A single line of terse output.
        separator: The one-byte field separator.

    Returns:
        A list of field values.
    """
    parts: List[bytes] = []
    current = bytearray()
    i = 0
    while i < len(line):
        byte = line[i:i + 1]
        nxt = line[i + 1:i + 2]
        if byte == _ESCAPE and nxt in (separator, _ESCAPE):
            current += nxt
            i += 2
        elif byte == separator:
            parts.append(bytes(current))
            current = bytearray()
            i += 1
        else:
            current += byte
            i += 1
    parts.append(bytes(current))
    return parts


def unescape_field(value: bytes, separator: bytes) -> bytes:
    """Remove nmcli's terse-mode escapes from a single-field value.

    nmcli escapes names even when only one field is requested, so a
    connection named ``Cafe:5G`` is listed as ``Cafe\\:5G``.
    """
    return separator.join(split_fields(value, separator))


def parse_decimal(raw: bytes) -> int:
    """Parse an unsigned decimal number made of ASCII digits.

    Signs, whitespace and locale digits are not accepted.

    Raises:
        ValueError: If ``raw`` is empty or holds a non-digit byte.
    """
    if not raw:
        raise ValueError('empty decimal value')
    value = 0
    for byte in raw:
        if not 0x30 <= byte <= 0x39:
            raise ValueError(f'invalid decimal value: {raw!r}')
        value = value * 10 + (byte - 0x30)
    return value


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass
class ScanOptions:
    """Options for :meth:`WlBackend.scan`.

    ``columns`` and ``terse_fields`` are mutually exclusive; when both are
    set, ``columns`` wins.
    """

    min_strength: int = 0
    re_scan: bool = False
    columns: Optional[str] = None
    terse_fields: Optional[str] = None


# ---------------------------------------------------------------------------
# Backend contract
# ---------------------------------------------------------------------------

class WlBackend(ABC):
    """Abstract interface for network backend operations.

    Every operation raises :class:`mados_wl.errors.NetworkAdapterError`
    when the backend reports a failure.
    """

    @abstractmethod
    def get_field_separator(self) -> bytes:
        """Return the single byte delimiting fields in every terse output."""

    @abstractmethod
    def get_wifi_status(self) -> bytes:
        """Return the Wi-Fi radio status (human-readable)."""

    @abstractmethod
    def toggle_wifi(self) -> bytes:
        """Flip the Wi-Fi radio and return the new state (human-readable)."""

    @abstractmethod
    def list_networks(self, show_active: bool, show_ssid: bool) -> bytes:
        """List the known networks (human-readable).

        Args:
            show_active: Only list the active (connected) networks.
            show_ssid: Only output the network names.
        """

    @abstractmethod
    def get_active_ssid_dev_pairs(self) -> bytes:
        """Return one ``SSID<sep>DEVICE`` record per active connection (terse)."""

    @abstractmethod
    def get_active_ssids(self) -> bytes:
        """Return one SSID per active connection (terse, single field)."""

    @abstractmethod
    def disconnect(self, ssid: bytes, forget: bool) -> bytes:
        """Disconnect the host from ``ssid`` (human-readable).

        If ``forget`` is set the network is also removed from the known
        network list.
        """

    @abstractmethod
    def scan(self, options: ScanOptions) -> bytes:
        """Return the networks in range.

        The output is human-readable unless ``options.terse_fields`` is set
        without ``options.columns``, in which case it is terse.

        Raises:
            mados_wl.errors.InvalidSignalStrength: If
                ``options.min_strength`` is outside 0-100.
        """

    @abstractmethod
    def is_known_ssid(self, ssid: bytes) -> bool:
        """Return True if ``ssid`` is in the host's known network list."""

    @abstractmethod
    def connect(self, ssid: bytes, password: Optional[bytes] = None,
                is_known_ssid: bool = False) -> bytes:
        """Connect the host to ``ssid`` (human-readable).

        The SSID/password pair is passed through to the backend untouched;
        the backend alone decides whether it is valid.
        """
