"""madOS WL - Error taxonomy.

Every failure raised by the package derives from :class:`WlError`, which
carries the process exit code the command-line front end should use.
"""

import enum
from typing import Optional

from .config import DEFAULT_EXIT_CODE


class WlError(Exception):
    """Base class for all mados-wl failures."""

    exit_code = DEFAULT_EXIT_CODE


class ErrorKind(enum.Enum):
    """One member per backend operation; the value is the message context."""

    WIFI_STATUS = 'unable to get the WiFi status'
    TOGGLE_WIFI = 'unable to toggle WiFi'
    LIST_NETWORKS = 'unable to list the networks'
    ACTIVE_CONNECTIONS = 'unable to get the active connections'
    SSID_STATUS = 'unable to get the SSID status'
    DISCONNECT = 'unable to disconnect'
    SCAN = 'unable to scan the available networks'
    CONNECT = 'unable to connect to the network'


class NetworkAdapterError(WlError):
    """A backend invocation failed.

    Attributes:
        kind: The operation that failed.
        detail: Diagnostic text reported by the backend, if any.
        exit_code: Exit code reported by the backend process.
    """

    def __init__(self, kind: ErrorKind, detail: Optional[str] = None,
                 exit_code: int = DEFAULT_EXIT_CODE):
        self.kind = kind
        self.detail = detail
        self.exit_code = exit_code
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.detail:
            return f'{self.kind.value}: {self.detail}'
        return self.kind.value


class InvalidSignalStrength(WlError, ValueError):
    """The requested minimum signal strength is outside the 0-100 range."""

    def __init__(self, value: int):
        self.value = value
        super().__init__(
            f'invalid signal strength {value}: expected a value between 0 and 100'
        )


class SelectionError(WlError):
    """The interactive SSID selection could not be resolved.

    ``detail`` holds the read or parse failure message; it is None when the
    answer was a valid number with no matching entry.
    """

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        if detail:
            super().__init__(f'unable to read the SSID selection: {detail}')
        else:
            super().__init__('unable to read the SSID selection: selection not found')


class PasswordReadError(WlError):
    """The masked password entry failed."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f'unable to read the password: {detail}')


class OutputError(WlError):
    """Writing to the output stream failed."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f'unable to write the output: {detail}')
