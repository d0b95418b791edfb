"""CLI entry point for mados-wl."""

import argparse
import logging
import os
import sys

from .. import __version__
from ..config import LOG_FORMAT
from ..errors import WlError
from ..factory import create_backend
from ..interfaces import ScanOptions
from .manager import WlManager

logger = logging.getLogger(__name__)

PROG = 'mados-wl'


def build_parser():
    """Build the mados-wl argument parser."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description='Manage WiFi connections through NetworkManager.',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='log backend invocations to stderr')

    sub = parser.add_subparsers(dest='command', metavar='<command>')

    sub.add_parser('status', aliases=['s'],
                   help='show the WiFi status and the connected networks')

    sub.add_parser('toggle', aliases=['t'], help='toggle WiFi on and off')

    scan = sub.add_parser('scan', aliases=['sc'], help='see available WiFi networks')
    scan.add_argument('-s', '--min-strength', type=int, default=0, metavar='N',
                      help='only show networks with a signal of at least N (0 to 100)')
    scan.add_argument('-r', '--re-scan', action='store_true',
                      help='bypass the cache and force a re-scan')
    fmt = scan.add_mutually_exclusive_group()
    fmt.add_argument('-c', '--columns', metavar='COLUMNS',
                     help='show the specified columns only')
    fmt.add_argument('-g', '--get-values', metavar='FIELDS',
                     help='show the values of the specified fields (terse output)')

    connect = sub.add_parser('connect', aliases=['c'], help='connect to a WiFi network')
    connect.add_argument('-i', '--ssid',
                         help='SSID to connect to; when omitted, pick one from a scan')
    connect.add_argument('-f', '--force-passwd', action='store_true',
                         help='re-enter the password even if the network is known')

    disconnect = sub.add_parser('disconnect', aliases=['d'],
                                help='disconnect from a WiFi network')
    disconnect.add_argument('ssid', nargs='?',
                            help='SSID to disconnect from; when omitted, pick an active one')
    disconnect.add_argument('-i', '--ssid', dest='ssid_option', metavar='SSID',
                            help='same as the positional SSID')
    disconnect.add_argument('-f', '--forget', action='store_true',
                            help='also remove the network from the known network list')

    ls = sub.add_parser('list-networks', aliases=['ls'], help='see known networks')
    ls.add_argument('-a', '--active', dest='show_active', action='store_true',
                    help='only show active (connected) networks')
    ls.add_argument('-s', '--ssid', dest='show_ssid', action='store_true',
                    help='only output the SSIDs')

    return parser


def _ssid(value):
    """Command-line SSIDs are text; backends take bytes."""
    return os.fsencode(value) if value is not None else None


def run(args, manager):
    """Dispatch parsed ``args`` to ``manager``."""
    command = args.command

    if command in (None, 'status', 's'):
        manager.status()
    elif command in ('toggle', 't'):
        manager.toggle()
    elif command in ('scan', 'sc'):
        manager.scan(ScanOptions(
            min_strength=args.min_strength,
            re_scan=args.re_scan,
            columns=args.columns,
            terse_fields=args.get_values,
        ))
    elif command in ('connect', 'c'):
        manager.connect(_ssid(args.ssid), args.force_passwd)
    elif command in ('disconnect', 'd'):
        ssid = args.ssid if args.ssid is not None else args.ssid_option
        manager.disconnect(_ssid(ssid), args.forget)
    elif command in ('list-networks', 'ls'):
        manager.list_networks(args.show_active, args.show_ssid)


def main(argv=None):
    """CLI entry point.

    Returns:
        The process exit code: 0 on success, the backend's exit code when
        the backend failed, 1 for any other failure.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    try:
        manager = WlManager(create_backend())
        run(args, manager)
    except WlError as exc:
        logger.debug('%s failed', args.command or 'status', exc_info=True)
        print(f'{PROG}: {exc}', file=sys.stderr)
        return exc.exit_code
    except KeyboardInterrupt:
        print(file=sys.stderr)
        return 130
    return 0


if __name__ == '__main__':
    sys.exit(main())
