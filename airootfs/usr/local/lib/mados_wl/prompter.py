"""madOS WL - Masked password entry.

The password is read without echo through :func:`getpass.getpass`.  If the
terminal cannot turn echo off, the read is refused instead of falling back
to a visible prompt.

The secret ends up in immutable ``bytes`` objects that the runtime frees on
its own schedule; it cannot be wiped from memory after use.  It is also
passed to nmcli on the command line, where other local users can see it in
the process table while the call runs.
"""

import getpass
import warnings
from typing import Optional

from .errors import PasswordReadError
from .output import write_bytes


def ask_password(ssid: bytes, stdout, read_secret=None) -> Optional[bytes]:
    """Prompt for the password of ``ssid``.

    Args:
        ssid: Network the password is for; shown in the prompt.
        stdout: Binary stream the prompt is written to.
        read_secret: Callable reading one line without echo.  Defaults to
            :func:`getpass.getpass`.

    Returns:
        The password with trailing whitespace removed, or None if empty.

    Raises:
        PasswordReadError: If the password cannot be read without echo.
    """
    if read_secret is None:
        read_secret = getpass.getpass

    write_bytes(stdout, b'Enter the password for ' + ssid + b': ')

    try:
        with warnings.catch_warnings():
            warnings.simplefilter('error', getpass.GetPassWarning)
            secret = read_secret('')
    except getpass.GetPassWarning as exc:
        raise PasswordReadError(f'cannot disable echo: {exc}') from exc
    except EOFError:
        raise PasswordReadError('end of input') from None
    except OSError as exc:
        raise PasswordReadError(str(exc)) from exc

    secret = secret.rstrip()
    if not secret:
        return None
    return secret.encode('utf-8')
