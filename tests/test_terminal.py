from __future__ import annotations

import io
import termios
import unittest
from unittest import mock

from lazytable import terminal
from lazytable.terminal import (
    CLEAR_SCREEN,
    HIDE_CURSOR,
    SHOW_CURSOR,
    RawModeController,
    TerminalOutput,
    TerminalUnavailable,
)


def _fake_attrs() -> list:
    cc = [0] * 32
    return [termios.IXON | termios.ICRNL, 0, 0, termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG, 0, 0, cc]


class RawModeControllerTests(unittest.TestCase):
    def test_acquire_rejects_non_tty(self) -> None:
        with mock.patch("lazytable.terminal.os.isatty", return_value=False), mock.patch(
            "lazytable.terminal.termios.tcsetattr"
        ) as tcsetattr:
            with self.assertRaises(TerminalUnavailable):
                RawModeController(stdin_fd=7).acquire()
        tcsetattr.assert_not_called()

    def test_acquire_without_stdin_descriptor(self) -> None:
        with mock.patch.object(terminal.sys, "stdin", io.StringIO()):
            with self.assertRaises(TerminalUnavailable):
                RawModeController().acquire()

    def test_acquire_wraps_termios_error(self) -> None:
        with mock.patch("lazytable.terminal.os.isatty", return_value=True), mock.patch(
            "lazytable.terminal.termios.tcgetattr", side_effect=termios.error(25, "not a tty")
        ):
            with self.assertRaises(TerminalUnavailable):
                RawModeController(stdin_fd=7).acquire()

    def test_acquire_clears_line_discipline_and_keeps_signals(self) -> None:
        with mock.patch("lazytable.terminal.os.isatty", return_value=True), mock.patch(
            "lazytable.terminal.termios.tcgetattr", side_effect=lambda _fd: _fake_attrs()
        ), mock.patch("lazytable.terminal.termios.tcsetattr") as tcsetattr, mock.patch(
            "lazytable.terminal.atexit"
        ) as fake_atexit:
            handle = RawModeController(stdin_fd=7).acquire()

        fd, when, attrs = tcsetattr.call_args.args
        self.assertEqual(fd, 7)
        self.assertEqual(when, termios.TCSAFLUSH)
        self.assertFalse(attrs[0] & termios.IXON)
        self.assertTrue(attrs[0] & termios.ICRNL)
        self.assertFalse(attrs[3] & termios.ECHO)
        self.assertFalse(attrs[3] & termios.ICANON)
        self.assertTrue(attrs[3] & termios.ISIG)
        self.assertEqual(attrs[6][termios.VMIN], 1)
        self.assertEqual(attrs[6][termios.VTIME], 0)
        fake_atexit.register.assert_called_once_with(handle.release)
        self.assertEqual(handle.stdin_fd, 7)
        self.assertFalse(handle.released)

    def test_release_restores_saved_attributes_once(self) -> None:
        with mock.patch("lazytable.terminal.os.isatty", return_value=True), mock.patch(
            "lazytable.terminal.termios.tcgetattr", side_effect=lambda _fd: _fake_attrs()
        ), mock.patch("lazytable.terminal.termios.tcsetattr") as tcsetattr, mock.patch(
            "lazytable.terminal.atexit"
        ) as fake_atexit:
            handle = RawModeController(stdin_fd=7).acquire()
            tcsetattr.reset_mock()

            handle.release()
            handle.release()

        tcsetattr.assert_called_once_with(7, termios.TCSADRAIN, _fake_attrs())
        fake_atexit.unregister.assert_called_once_with(handle.release)
        self.assertTrue(handle.released)

    def test_raw_mode_context_releases_on_error(self) -> None:
        with mock.patch("lazytable.terminal.os.isatty", return_value=True), mock.patch(
            "lazytable.terminal.termios.tcgetattr", side_effect=lambda _fd: _fake_attrs()
        ), mock.patch("lazytable.terminal.termios.tcsetattr"), mock.patch("lazytable.terminal.atexit"):
            controller = RawModeController(stdin_fd=7)
            with self.assertRaises(KeyError):
                with controller.raw_mode() as handle:
                    raise KeyError("x")

        self.assertTrue(handle.released)


class TerminalOutputTests(unittest.TestCase):
    def test_control_sequences(self) -> None:
        stream = io.StringIO()
        output = TerminalOutput(stream)

        output.hide_cursor()
        output.write_frame("row\n")
        output.show_cursor()

        self.assertEqual(stream.getvalue(), HIDE_CURSOR + CLEAR_SCREEN + "row\n" + SHOW_CURSOR)

    def test_defaults_to_stdout(self) -> None:
        with mock.patch.object(terminal.sys, "stdout", io.StringIO()) as fake_stdout:
            output = TerminalOutput()
            output.clear_screen()
        self.assertEqual(fake_stdout.getvalue(), CLEAR_SCREEN)


if __name__ == "__main__":
    unittest.main()
