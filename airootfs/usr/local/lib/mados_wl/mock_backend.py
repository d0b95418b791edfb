"""madOS WL - Mock backend for testing.

Provides an in-memory implementation of :class:`WlBackend` that simulates
nmcli without touching the host's network configuration.  Every call is
recorded in ``calls`` so tests can assert on the order of operations.
"""

from typing import List, Optional, Tuple

from .config import MAX_SIGNAL_STRENGTH, MIN_SIGNAL_STRENGTH, NMCLI_FIELD_SEPARATOR
from .errors import ErrorKind, InvalidSignalStrength, NetworkAdapterError
from .interfaces import LINE_FEED, ScanOptions, WlBackend


def _escape(value: bytes) -> bytes:
    """Escape a value the way nmcli does in terse output."""
    escaped = value.replace(b'\\', b'\\\\')
    return escaped.replace(NMCLI_FIELD_SEPARATOR, b'\\' + NMCLI_FIELD_SEPARATOR)


class MockWlBackend(WlBackend):
    """Mock implementation for unit testing.

    ``networks`` holds the ``(ssid, signal)`` pairs "in range", ``known``
    the saved profiles and ``active`` the ``(ssid, device)`` pairs of the
    current connections.
    """

    def __init__(self, networks=None, known=None, active=None, enabled=True):
        self.networks: List[Tuple[bytes, int]] = list(networks or [])
        self.known: List[bytes] = list(known or [])
        self.active: List[Tuple[bytes, bytes]] = list(active or [])
        self.enabled = enabled
        self.calls: List[tuple] = []
        self.failures = {}

    def fail(self, method: str, kind: ErrorKind, detail: str = 'mock failure',
             exit_code: int = 1) -> None:
        """Make every later call of ``method`` raise a NetworkAdapterError."""
        self.failures[method] = NetworkAdapterError(kind, detail, exit_code)

    def _record(self, method: str, *args) -> None:
        self.calls.append((method,) + args)
        if method in self.failures:
            raise self.failures[method]

    def get_field_separator(self) -> bytes:
        return NMCLI_FIELD_SEPARATOR

    def get_wifi_status(self) -> bytes:
        self._record('get_wifi_status')
        return b'enabled\n' if self.enabled else b'disabled\n'

    def toggle_wifi(self) -> bytes:
        self._record('toggle_wifi')
        self.enabled = not self.enabled
        if not self.enabled:
            self.active.clear()
        return b'enabled' if self.enabled else b'disabled'

    def list_networks(self, show_active: bool, show_ssid: bool) -> bytes:
        self._record('list_networks', show_active, show_ssid)
        names = [ssid for ssid, _ in self.active] if show_active else self.known
        header = b'NAME' if show_ssid else b'NAME  TYPE'
        rows = [name if show_ssid else name + b'  wifi' for name in names]
        return LINE_FEED.join([header] + rows) + LINE_FEED

    def get_active_ssid_dev_pairs(self) -> bytes:
        self._record('get_active_ssid_dev_pairs')
        return b''.join(
            _escape(ssid) + NMCLI_FIELD_SEPARATOR + _escape(dev) + LINE_FEED
            for ssid, dev in self.active
        )

    def get_active_ssids(self) -> bytes:
        self._record('get_active_ssids')
        return b''.join(_escape(ssid) + LINE_FEED for ssid, _ in self.active)

    def disconnect(self, ssid: bytes, forget: bool) -> bytes:
        self._record('disconnect', ssid, forget)
        self.active = [(s, d) for s, d in self.active if s != ssid]
        if forget:
            self.known = [s for s in self.known if s != ssid]
            return b'Connection \'' + ssid + b'\' successfully deleted.\n'
        return b'Connection \'' + ssid + b'\' successfully deactivated.\n'

    def scan(self, options: ScanOptions) -> bytes:
        if not MIN_SIGNAL_STRENGTH <= options.min_strength <= MAX_SIGNAL_STRENGTH:
            raise InvalidSignalStrength(options.min_strength)
        self._record('scan', options)
        rows = [(ssid, signal) for ssid, signal in self.networks
                if signal >= options.min_strength]
        if options.terse_fields is not None and options.columns is None:
            return b''.join(
                _escape(ssid) + NMCLI_FIELD_SEPARATOR + str(signal).encode() + LINE_FEED
                for ssid, signal in rows
            )
        lines = [b'SSID  SIGNAL'] + [ssid + b'  ' + str(signal).encode() for ssid, signal in rows]
        return LINE_FEED.join(lines) + LINE_FEED

    def is_known_ssid(self, ssid: bytes) -> bool:
        self._record('is_known_ssid', ssid)
        return ssid in self.known

    def connect(self, ssid: bytes, password: Optional[bytes] = None,
                is_known_ssid: bool = False) -> bytes:
        if is_known_ssid and password:
            self.disconnect(ssid, forget=True)
        self._record('connect', ssid, password, is_known_ssid)
        if ssid not in self.known:
            self.known.append(ssid)
        self.active.append((ssid, b'wlan0'))
        return b'Device \'wlan0\' successfully activated.\n'
