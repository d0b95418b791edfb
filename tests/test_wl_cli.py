#!/usr/bin/env python3
"""
Tests for the mados-wl command-line front end.

Drives WlManager and command.main() with the mock backend and in-memory
streams; validates output, call ordering and exit codes.
"""

import sys
import os
import io
import unittest
from unittest.mock import patch, MagicMock

sys.path.insert(
    0, os.path.join(os.path.dirname(__file__), "..", "airootfs", "usr", "local", "lib")
)

from mados_wl.cli.manager import WlManager
from mados_wl.cli import command
from mados_wl.factory import create_backend
from mados_wl.mock_backend import MockWlBackend
from mados_wl.nmcli import NmcliBackend
from mados_wl.interfaces import ScanOptions
from mados_wl.errors import (
    ErrorKind,
    InvalidSignalStrength,
    NetworkAdapterError,
    OutputError,
    WlError,
)


def _methods(backend):
    return [call[0] for call in backend.calls]


# ═══════════════════════════════════════════════════════════════════════════
# WlManager
# ═══════════════════════════════════════════════════════════════════════════
class TestManagerDirectOperations(unittest.TestCase):
    """Verify the operations that need no user input."""

    def setUp(self):
        self.backend = MockWlBackend(
            networks=[(b'Home', 80), (b'Cafe', 30)],
            known=[b'Home', b'Wired'],
            active=[(b'Home', b'wlan0'), (b'Wired', b'eth0')],
        )
        self.stdout = io.BytesIO()
        self.manager = WlManager(self.backend, io.StringIO(), self.stdout)

    def test_status(self):
        self.manager.status()
        self.assertEqual(
            self.stdout.getvalue(),
            b'wifi: enabled\nconnected networks: Home/wlan0, Wired/eth0\n',
        )

    def test_status_without_connections(self):
        self.backend.active = []
        self.manager.status()
        self.assertEqual(self.stdout.getvalue(), b'wifi: enabled\nconnected networks: none\n')

    def test_toggle(self):
        self.manager.toggle()
        self.assertEqual(self.stdout.getvalue(), b'wifi: disabled\n')
        self.manager.toggle()
        self.assertEqual(self.stdout.getvalue(), b'wifi: disabled\nwifi: enabled\n')

    def test_scan(self):
        self.manager.scan(ScanOptions(min_strength=50))
        self.assertEqual(self.stdout.getvalue(), b'SSID  SIGNAL\nHome  80\n')

    def test_scan_rejects_invalid_strength(self):
        with self.assertRaises(InvalidSignalStrength):
            self.manager.scan(ScanOptions(min_strength=101))
        self.assertEqual(self.backend.calls, [])

    def test_list_networks(self):
        self.manager.list_networks(show_active=False, show_ssid=True)
        self.assertEqual(self.stdout.getvalue(), b'NAME\nHome\nWired\n')
        self.assertEqual(self.backend.calls, [('list_networks', False, True)])

    def test_write_failure(self):
        stdout = MagicMock()
        stdout.write.side_effect = BrokenPipeError('Broken pipe')
        with self.assertRaises(OutputError):
            WlManager(self.backend, io.StringIO(), stdout).toggle()


class TestManagerConnect(unittest.TestCase):
    """Verify the connect flow."""

    def setUp(self):
        self.backend = MockWlBackend(networks=[(b'Home', 80), (b'New', 40)], known=[b'Home'])
        self.stdout = io.BytesIO()
        self.read_secret = MagicMock(return_value='secret')

    def _manager(self, answer=''):
        return WlManager(self.backend, io.StringIO(answer), self.stdout, self.read_secret)

    def test_known_network_skips_prompt(self):
        self._manager().connect(b'Home')
        self.read_secret.assert_not_called()
        self.assertEqual(
            self.backend.calls,
            [('is_known_ssid', b'Home'), ('connect', b'Home', None, True)],
        )
        self.assertEqual(self.stdout.getvalue(), b"Device 'wlan0' successfully activated.\n")

    def test_forced_password_forgets_known_profile_first(self):
        self._manager().connect(b'Home', force_passwd=True)
        self.read_secret.assert_called_once()
        self.assertEqual(_methods(self.backend), ['is_known_ssid', 'disconnect', 'connect'])
        self.assertEqual(self.backend.calls[1], ('disconnect', b'Home', True))
        self.assertEqual(self.backend.calls[2], ('connect', b'Home', b'secret', True))
        self.assertTrue(
            self.stdout.getvalue().startswith(b'Enter the password for Home: ')
        )

    def test_unknown_network_prompts(self):
        self._manager().connect(b'New')
        self.read_secret.assert_called_once()
        self.assertEqual(self.backend.calls[-1], ('connect', b'New', b'secret', False))

    def test_unknown_open_network(self):
        self.read_secret.return_value = ''
        self._manager().connect(b'New')
        self.assertEqual(self.backend.calls[-1], ('connect', b'New', None, False))

    def test_select_from_scan(self):
        self._manager('1\n').connect()
        self.assertEqual(_methods(self.backend), ['scan', 'is_known_ssid', 'connect'])
        self.assertEqual(self.backend.calls[-1], ('connect', b'New', b'secret', False))
        out = self.stdout.getvalue()
        self.assertIn(b'(0) Home (sig: 80)\n(1) New (sig: 40)\n', out)
        self.assertIn(b'Enter the password for New: ', out)

    def test_bad_selection_connects_nothing(self):
        with self.assertRaises(WlError):
            self._manager('9\n').connect()
        self.assertEqual(_methods(self.backend), ['scan'])

    def test_backend_failure_propagates(self):
        self.backend.fail('connect', ErrorKind.CONNECT, 'Secrets were required', exit_code=4)
        with self.assertRaises(NetworkAdapterError) as ctx:
            self._manager().connect(b'New')
        self.assertEqual(ctx.exception.exit_code, 4)


class TestManagerDisconnect(unittest.TestCase):
    """Verify the disconnect flow."""

    def setUp(self):
        self.backend = MockWlBackend(
            known=[b'Home', b'Work'],
            active=[(b'lo', b'lo'), (b'Home', b'wlan0'), (b'Work', b'wlan1')],
        )
        self.stdout = io.BytesIO()

    def test_forget(self):
        WlManager(self.backend, io.StringIO(), self.stdout).disconnect(b'Home', forget=True)
        self.assertEqual(self.backend.calls, [('disconnect', b'Home', True)])
        self.assertEqual(self.stdout.getvalue(), b"Connection 'Home' successfully deleted.\n")
        self.assertNotIn(b'Home', self.backend.known)

    def test_down_only(self):
        WlManager(self.backend, io.StringIO(), self.stdout).disconnect(b'Home')
        self.assertEqual(self.backend.calls, [('disconnect', b'Home', False)])
        self.assertIn(b'Home', self.backend.known)

    def test_select_active(self):
        WlManager(self.backend, io.StringIO('1\n'), self.stdout).disconnect()
        self.assertEqual(
            self.backend.calls, [('get_active_ssids',), ('disconnect', b'Work', False)]
        )
        self.assertTrue(self.stdout.getvalue().startswith(b'(0) Home\n(1) Work\n'))

    def test_failure_carries_exit_code(self):
        self.backend.fail('disconnect', ErrorKind.DISCONNECT, "unknown connection 'X'", 10)
        with self.assertRaises(NetworkAdapterError) as ctx:
            WlManager(self.backend, io.StringIO(), self.stdout).disconnect(b'X')
        self.assertEqual(ctx.exception.exit_code, 10)
        self.assertEqual(self.stdout.getvalue(), b'')


# ═══════════════════════════════════════════════════════════════════════════
# Factory
# ═══════════════════════════════════════════════════════════════════════════
class TestCreateBackend(unittest.TestCase):
    """Verify create_backend() honours the environment."""

    def test_production_default(self):
        backend = create_backend({})
        self.assertIsInstance(backend, NmcliBackend)
        self.assertEqual(backend.program, 'nmcli')

    def test_custom_program(self):
        backend = create_backend({'MADOS_WL_NMCLI': '/usr/local/bin/nmcli'})
        self.assertEqual(backend.program, '/usr/local/bin/nmcli')

    def test_test_mode(self):
        self.assertIsInstance(create_backend({'MADOS_WL_MODE': 'test'}), MockWlBackend)

    def test_unknown_mode(self):
        with self.assertRaises(WlError):
            create_backend({'MADOS_WL_MODE': 'staging'})

    def test_reads_process_environment(self):
        with patch.dict(os.environ, {'MADOS_WL_MODE': 'test'}):
            self.assertIsInstance(create_backend(), MockWlBackend)


# ═══════════════════════════════════════════════════════════════════════════
# command.main()
# ═══════════════════════════════════════════════════════════════════════════
class TestParser(unittest.TestCase):
    """Verify argument parsing."""

    def setUp(self):
        self.parser = command.build_parser()

    def test_scan_options(self):
        args = self.parser.parse_args(['sc', '-s', '40', '-r', '-g', 'SSID'])
        self.assertEqual(args.min_strength, 40)
        self.assertTrue(args.re_scan)
        self.assertEqual(args.get_values, 'SSID')
        self.assertIsNone(args.columns)

    def test_columns_and_values_are_exclusive(self):
        with patch('sys.stderr', new_callable=io.StringIO):
            with self.assertRaises(SystemExit) as ctx:
                self.parser.parse_args(['scan', '-c', 'SSID', '-g', 'SSID'])
        self.assertEqual(ctx.exception.code, 2)

    def test_non_numeric_strength(self):
        with patch('sys.stderr', new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                self.parser.parse_args(['scan', '-s', 'high'])

    def test_list_networks_flags(self):
        args = self.parser.parse_args(['ls', '-a', '-s'])
        self.assertTrue(args.show_active)
        self.assertTrue(args.show_ssid)

    def test_connect_flags(self):
        args = self.parser.parse_args(['c', '-i', 'Home', '-f'])
        self.assertEqual(args.ssid, 'Home')
        self.assertTrue(args.force_passwd)


class TestMain(unittest.TestCase):
    """Verify command.main() output and exit codes."""

    def setUp(self):
        self.backend = MockWlBackend(
            networks=[(b'Home', 80), (b'Cafe', 30)],
            known=[b'Home'],
            active=[(b'Home', b'wlan0')],
        )
        patcher = patch('mados_wl.cli.command.create_backend', return_value=self.backend)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _main(self, argv):
        out = io.BytesIO()
        stdout = io.TextIOWrapper(out)
        stderr = io.StringIO()
        with patch('sys.stdout', stdout), patch('sys.stderr', stderr):
            code = command.main(argv)
        return code, out.getvalue(), stderr.getvalue()

    def test_status_is_default(self):
        code, out, _ = self._main([])
        self.assertEqual(code, 0)
        self.assertEqual(out, b'wifi: enabled\nconnected networks: Home/wlan0\n')

    def test_scan(self):
        code, out, _ = self._main(['scan', '--min-strength', '50'])
        self.assertEqual(code, 0)
        self.assertEqual(out, b'SSID  SIGNAL\nHome  80\n')

    def test_invalid_strength(self):
        code, out, err = self._main(['sc', '-s', '101'])
        self.assertEqual(code, 1)
        self.assertEqual(out, b'')
        self.assertIn('mados-wl: invalid signal strength 101', err)
        self.assertEqual(self.backend.calls, [])

    def test_disconnect_positional_and_option(self):
        for argv in (['d', 'Home'], ['d', '-i', 'Home']):
            with self.subTest(argv=argv):
                self.backend.calls.clear()
                code, _, _ = self._main(argv)
                self.assertEqual(code, 0)
                self.assertEqual(self.backend.calls, [('disconnect', b'Home', False)])

    def test_disconnect_forget(self):
        code, _, _ = self._main(['disconnect', '--forget', 'Home'])
        self.assertEqual(code, 0)
        self.assertEqual(self.backend.calls, [('disconnect', b'Home', True)])

    def test_connect_known(self):
        code, out, _ = self._main(['connect', '--ssid', 'Home'])
        self.assertEqual(code, 0)
        self.assertEqual(self.backend.calls[-1], ('connect', b'Home', None, True))

    def test_backend_exit_code_is_forwarded(self):
        self.backend.fail('disconnect', ErrorKind.DISCONNECT, "unknown connection 'Nope'", 10)
        code, out, err = self._main(['d', 'Nope'])
        self.assertEqual(code, 10)
        self.assertEqual(out, b'')
        self.assertIn("unable to disconnect: unknown connection 'Nope'", err)

    def test_selection_error_exit_code(self):
        with patch('sys.stdin', io.StringIO('x\n')):
            code, _, err = self._main(['d'])
        self.assertEqual(code, 1)
        self.assertIn('unable to read the SSID selection', err)

    def test_list_networks(self):
        code, out, _ = self._main(['list-networks', '--active'])
        self.assertEqual(code, 0)
        self.assertEqual(out, b'NAME  TYPE\nHome  wifi\n')

    def test_toggle(self):
        code, out, _ = self._main(['t'])
        self.assertEqual(code, 0)
        self.assertEqual(out, b'wifi: disabled\n')

    def test_interrupt(self):
        self.backend.failures['toggle_wifi'] = KeyboardInterrupt()
        code, _, _ = self._main(['toggle'])
        self.assertEqual(code, 130)


class TestMainFactoryFailure(unittest.TestCase):
    """Verify an invalid backend mode is reported, not raised."""

    def test_unknown_mode(self):
        stderr = io.StringIO()
        with patch.dict(os.environ, {'MADOS_WL_MODE': 'bogus'}), patch('sys.stderr', stderr):
            code = command.main(['status'])
        self.assertEqual(code, 1)
        self.assertIn('unknown MADOS_WL_MODE', stderr.getvalue())


if __name__ == '__main__':
    unittest.main()
