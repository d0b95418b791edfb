"""madOS WL - Backend factory.

Factory pattern to create the backend instance once at the program
boundary; the instance is then passed to every consumer.
"""

import logging
import os

from .config import DEFAULT_MODE, MODE_ENV, NMCLI_ENV, NMCLI_PROGRAM
from .errors import WlError

logger = logging.getLogger(__name__)


def create_backend(environ=None):
    """Create backend instance based on environment mode.

    Environment:
        MADOS_WL_MODE: 'production' (default) or 'test'
        MADOS_WL_NMCLI: nmcli executable to run in production mode

    Returns:
        Backend instance implementing WlBackend.

    Raises:
        WlError: If MADOS_WL_MODE names an unknown mode.
    """
    if environ is None:
        environ = os.environ
    mode = environ.get(MODE_ENV, DEFAULT_MODE)

    if mode == 'test':
        from .mock_backend import MockWlBackend

        logger.debug('Using the mock backend')
        return MockWlBackend()

    if mode != 'production':
        raise WlError(f'unknown {MODE_ENV} value: {mode!r}')

    from .nmcli import NmcliBackend

    program = environ.get(NMCLI_ENV) or NMCLI_PROGRAM
    logger.debug('Using the nmcli backend (%s)', program)
    # The executable is not looked up here; a missing nmcli surfaces on first use.
    return NmcliBackend(program)
