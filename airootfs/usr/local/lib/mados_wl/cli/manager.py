"""WL Manager CLI - operation flows on top of a backend."""

import sys

from ..interfaces import LINE_FEED, ScanOptions, WlBackend, split_fields, split_lines
from ..output import write_bytes
from ..prompter import ask_password
from ..selector import select_active_ssid, select_scanned_ssid


class WlManager:
    """Runs the mados-wl operations and writes their results.

    The backend is injected by the caller; input and output default to the
    process's standard streams.  Results are written to ``stdout`` as raw
    bytes, exactly as the backend returned them unless stated otherwise.
    """

    def __init__(self, backend: WlBackend, stdin=None, stdout=None, read_secret=None):
        self.backend = backend
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout.buffer
        self.read_secret = read_secret

    def _write(self, data: bytes) -> None:
        write_bytes(self.stdout, data)

    def status(self):
        """Write the radio state and the active connections."""
        raw_pairs = self.backend.get_active_ssid_dev_pairs()
        wifi_status = self.backend.get_wifi_status().strip()

        separator = self.backend.get_field_separator()
        pairs = []
        for line in split_lines(raw_pairs):
            if not line:
                continue
            fields = split_fields(line, separator)
            pairs.append(fields[0] + b'/' + b''.join(fields[1:2]))

        self._write(b'wifi: ' + wifi_status + LINE_FEED)
        self._write(b'connected networks: ' + (b', '.join(pairs) or b'none') + LINE_FEED)

    def toggle(self):
        """Flip the radio and write its new state."""
        self._write(b'wifi: ' + self.backend.toggle_wifi() + LINE_FEED)

    def scan(self, options: ScanOptions):
        """Write the networks in range."""
        self._write(self.backend.scan(options))

    def list_networks(self, show_active=False, show_ssid=False):
        """Write the known networks."""
        self._write(self.backend.list_networks(show_active, show_ssid))

    def connect(self, ssid=None, force_passwd=False):
        """Connect to a network, asking for the SSID and password as needed.

        Args:
            ssid: Network SSID (bytes).  When None, the networks in range
                are listed and the user picks one.
            force_passwd: Ask for the password even if the network is known.
        """
        if ssid is None:
            ssid = select_scanned_ssid(self.backend, self.stdin, self.stdout)

        is_known = self.backend.is_known_ssid(ssid)

        password = None
        if force_passwd or not is_known:
            password = ask_password(ssid, self.stdout, self.read_secret)

        self._write(self.backend.connect(ssid, password, is_known))

    def disconnect(self, ssid=None, forget=False):
        """Disconnect from a network, asking which one when ``ssid`` is None.

        Args:
            ssid: Network SSID (bytes).
            forget: Also remove the network from the known network list.
        """
        if ssid is None:
            ssid = select_active_ssid(self.backend, self.stdin, self.stdout)
        self._write(self.backend.disconnect(ssid, forget))
