"""madOS WL - Network backend using NetworkManager (nmcli).

All network operations are performed by invoking nmcli as a subprocess.
Calls are synchronous and no timeout is applied: a hung nmcli blocks the
calling operation until it exits.
"""

import logging
import os
import subprocess
from typing import Dict, List, Optional

from .config import (
    DEFAULT_EXIT_CODE,
    MAX_SIGNAL_STRENGTH,
    MIN_SIGNAL_STRENGTH,
    NMCLI_FIELD_SEPARATOR,
    NMCLI_PROGRAM,
)
from .errors import ErrorKind, InvalidSignalStrength, NetworkAdapterError
from .interfaces import (
    LINE_FEED,
    ScanOptions,
    WlBackend,
    parse_decimal,
    split_lines,
    unescape_field,
)

logger = logging.getLogger(__name__)

WIFI_ENABLED = b'enabled'
WIFI_DISABLED = b'disabled'

_REDACTED = b'******'


# ---------------------------------------------------------------------------
# Helper: run commands
# ---------------------------------------------------------------------------

def _run_command(cmd: List[bytes]) -> subprocess.CompletedProcess:
    """Execute a command and return the CompletedProcess result.

    Output is captured as bytes; nothing is decoded here.

    Raises:
        OSError: If the command cannot be executed.
    """
    return subprocess.run(cmd, capture_output=True)


def _redact(args: List[bytes]) -> List[bytes]:
    """Return a copy of ``args`` with the value after 'password' masked."""
    redacted = list(args)
    for i, arg in enumerate(redacted[:-1]):
        if arg == b'password':
            redacted[i + 1] = _REDACTED
    return redacted


class NmcliBackend(WlBackend):
    """:class:`WlBackend` implementation driving nmcli.

    The backend is stateless; instances may be shared or created per call.
    """

    def __init__(self, program: str = NMCLI_PROGRAM):
        self.program = program

    def _exec(self, args: List[bytes], kind: ErrorKind) -> bytes:
        """Run nmcli with ``args`` and return its stdout.

        Raises:
            NetworkAdapterError: ``kind`` with nmcli's stderr and exit code
                on a nonzero exit, or when nmcli cannot be executed.
        """
        cmd = [os.fsencode(self.program)] + args
        logger.debug('Running %s', b' '.join(_redact(cmd)).decode('utf-8', errors='replace'))
        try:
            result = _run_command(cmd)
        except FileNotFoundError:
            raise NetworkAdapterError(kind, f'{self.program} not found') from None
        except OSError as exc:
            # Not executable, a directory, or otherwise unusable.
            raise NetworkAdapterError(kind, f'{self.program}: {exc.strerror or exc}') from exc

        if result.returncode != 0:
            # A negative code means nmcli was killed by a signal.
            exit_code = result.returncode if result.returncode > 0 else DEFAULT_EXIT_CODE
            detail = result.stderr.decode('utf-8', errors='replace').strip()
            logger.debug('%s exited with code %s: %s', self.program, result.returncode, detail)
            raise NetworkAdapterError(
                kind,
                detail or f'{self.program} exited with code {result.returncode}',
                exit_code,
            )
        return result.stdout

    # -- contract ---------------------------------------------------------

    def get_field_separator(self) -> bytes:
        return NMCLI_FIELD_SEPARATOR

    def get_wifi_status(self) -> bytes:
        """Return nmcli's radio status line, e.g. ``b'enabled\\n'`` (human-readable)."""
        return self._exec([b'-g', b'WIFI', b'general'], ErrorKind.WIFI_STATUS)

    def toggle_wifi(self) -> bytes:
        """Flip the radio and return ``b'enabled'`` or ``b'disabled'`` (human-readable).

        The current state is queried first; its failure is reported as a
        toggle failure.
        """
        try:
            current = self.get_wifi_status().strip()
        except NetworkAdapterError as exc:
            raise NetworkAdapterError(ErrorKind.TOGGLE_WIFI, exc.detail, exc.exit_code) from exc

        if current == WIFI_ENABLED:
            switch, new_status = b'off', WIFI_DISABLED
        else:
            switch, new_status = b'on', WIFI_ENABLED

        self._exec([b'radio', b'wifi', switch], ErrorKind.TOGGLE_WIFI)
        return new_status

    def list_networks(self, show_active: bool, show_ssid: bool) -> bytes:
        """Return nmcli's connection table (human-readable)."""
        args: List[bytes] = []
        if show_ssid:
            args += [b'--fields', b'NAME']
        args += [b'connection', b'show']
        if show_active:
            args.append(b'--active')
        return self._exec(args, ErrorKind.LIST_NETWORKS)

    def get_active_ssid_dev_pairs(self) -> bytes:
        """Return ``NAME:DEVICE`` records of the active connections (terse)."""
        args = [b'-g', b'NAME,DEVICE', b'connection', b'show', b'--active']
        return self._exec(args, ErrorKind.ACTIVE_CONNECTIONS)

    def get_active_ssids(self) -> bytes:
        """Return the names of the active connections, one per line (terse)."""
        args = [b'-g', b'NAME', b'connection', b'show', b'--active']
        return self._exec(args, ErrorKind.ACTIVE_CONNECTIONS)

    def disconnect(self, ssid: bytes, forget: bool) -> bytes:
        """Bring the connection down, or delete its profile if ``forget`` (human-readable)."""
        action = b'delete' if forget else b'down'
        return self._exec([b'connection', action, b'id', ssid], ErrorKind.DISCONNECT)

    def is_known_ssid(self, ssid: bytes) -> bool:
        output = self._exec([b'-g', b'NAME', b'connection', b'show'], ErrorKind.SSID_STATUS)
        separator = self.get_field_separator()
        return any(unescape_field(line, separator) == ssid for line in split_lines(output))

    def connect(self, ssid: bytes, password: Optional[bytes] = None,
                is_known_ssid: bool = False) -> bytes:
        """Connect to ``ssid`` (human-readable).

        A password given for a known network replaces the stored one: the
        old profile is deleted first so nmcli builds a fresh one.  Without
        a password a known profile is brought up by name and an unknown
        network is joined as an open network.
        """
        if is_known_ssid and password:
            self.disconnect(ssid, forget=True)

        if password:
            args = [b'device', b'wifi', b'connect', ssid, b'password', password]
        elif is_known_ssid:
            args = [b'connection', b'up', b'id', ssid]
        else:
            args = [b'device', b'wifi', b'connect', ssid]
        return self._exec(args, ErrorKind.CONNECT)

    def scan(self, options: ScanOptions) -> bytes:
        """Return the networks in range, filtered by signal strength.

        Output format follows the options: ``columns`` gives nmcli's table
        restricted to those columns, ``terse_fields`` (without ``columns``)
        gives terse values only, neither gives the full table.

        nmcli cannot filter by signal itself, so the signal column is
        fetched with a second invocation and matched to the listing by row
        position.  This assumes both calls see the same networks in the
        same order; nothing here can verify that.
        """
        if not MIN_SIGNAL_STRENGTH <= options.min_strength <= MAX_SIGNAL_STRENGTH:
            raise InvalidSignalStrength(options.min_strength)

        args: List[bytes] = []
        if options.columns is not None:
            args += [b'-f', options.columns.encode()]
        elif options.terse_fields is not None:
            args += [b'-g', options.terse_fields.encode()]
        args += [b'device', b'wifi', b'list']
        if options.re_scan:
            args += [b'--rescan', b'yes']

        scan_result = self._exec(args, ErrorKind.SCAN)
        signal_result = self._exec(
            [b'-g', b'SIGNAL', b'device', b'wifi', b'list'], ErrorKind.SCAN
        )

        signals: Dict[int, int] = {}
        for idx, raw in enumerate(split_lines(signal_result)):
            try:
                signals[idx] = parse_decimal(raw)
            except ValueError as exc:
                raise NetworkAdapterError(ErrorKind.SCAN, str(exc)) from exc

        # Terse output has no header row to skip.
        has_header = options.columns is not None or options.terse_fields is None
        offset = 1 if has_header else 0

        filtered = bytearray()
        for idx, line in enumerate(split_lines(scan_result)):
            if has_header and idx == 0:
                filtered += line + LINE_FEED
                continue
            signal = signals.get(idx - offset)
            if signal is None:
                if options.min_strength > 0:
                    continue
            elif signal < options.min_strength:
                continue
            filtered += line + LINE_FEED
        return bytes(filtered)
