"""Tests for the terminal drivers."""

import errno
import termios
from unittest.mock import MagicMock, patch

import pytest

from red.errors import FatalError
from red.terminal import ScriptedTerminal, TerminalInterface


def fake_attributes():
    cc = [b"\x00"] * 32
    return [
        termios.ICRNL | termios.IXON | termios.BRKINT,
        termios.OPOST,
        0,
        termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN,
        0,
        0,
        cc,
    ]


def create_interface(height=24, width=80, is_a_tty=True):
    term = MagicMock()
    term.height = height
    term.width = width
    term.is_a_tty = is_a_tty
    return TerminalInterface(terminal=term, stdin_fd=0, stdout_fd=1)


@patch('red.terminal.atexit.register')
@patch('red.terminal.termios.tcsetattr')
@patch('red.terminal.termios.tcgetattr')
def test_enter_raw_mode_sets_flags(tcgetattr, tcsetattr, register):
    tcgetattr.side_effect = lambda fd: fake_attributes()
    interface = create_interface()

    interface.enter_raw_mode()

    fd, when, raw = tcsetattr.call_args[0]
    assert when == termios.TCSAFLUSH
    assert raw[0] & (termios.ICRNL | termios.IXON | termios.BRKINT) == 0
    assert raw[1] & termios.OPOST == 0
    assert raw[2] & termios.CS8 == termios.CS8
    assert raw[3] & (termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN) == 0
    assert raw[6][termios.VMIN] == 0
    assert raw[6][termios.VTIME] == 1
    register.assert_called_once_with(interface.exit_raw_mode)


@patch('red.terminal.atexit.register')
@patch('red.terminal.termios.tcsetattr')
@patch('red.terminal.termios.tcgetattr')
def test_exit_raw_mode_restores_saved_attributes_once(tcgetattr, tcsetattr, register):
    tcgetattr.side_effect = lambda fd: fake_attributes()
    interface = create_interface()
    interface.enter_raw_mode()
    tcsetattr.reset_mock()

    interface.exit_raw_mode()
    interface.exit_raw_mode()

    tcsetattr.assert_called_once_with(0, termios.TCSAFLUSH, fake_attributes())


@patch('red.terminal.termios.tcgetattr', side_effect=termios.error(25, "Inappropriate ioctl for device"))
def test_enter_raw_mode_failure_is_fatal(tcgetattr):
    with pytest.raises(FatalError) as excinfo:
        create_interface().enter_raw_mode()
    assert excinfo.value.context == "tcgetattr"


def test_read_byte():
    interface = create_interface()
    with patch('red.terminal.os.read', return_value=b"a"):
        assert interface.read_byte() == ord("a")
    with patch('red.terminal.os.read', return_value=b""):
        assert interface.read_byte() is None
    with patch('red.terminal.os.read', side_effect=OSError(errno.EAGAIN, "again")):
        assert interface.read_byte() is None


def test_read_failure_is_fatal():
    interface = create_interface()
    with patch('red.terminal.os.read', side_effect=OSError(errno.EIO, "Input/output error")):
        with pytest.raises(FatalError) as excinfo:
            interface.read_byte()
    assert str(excinfo.value) == "read: Input/output error"


def test_write_loops_until_all_bytes_written():
    interface = create_interface()
    with patch('red.terminal.os.write', side_effect=[3, 2]) as write:
        interface.write(b"hello")
    assert write.call_count == 2


def test_window_size_from_blessed():
    assert create_interface(height=30, width=100).window_size() == (30, 100)


def test_write_failure_is_fatal():
    interface = create_interface()
    with patch('red.terminal.os.write', side_effect=OSError(errno.EIO, "Input/output error")):
        with pytest.raises(FatalError) as excinfo:
            interface.write(b"frame")
    assert str(excinfo.value) == "write: Input/output error"


def test_window_size_queries_cursor_when_not_a_tty():
    """Blessed falls back to 80x25 off a tty, so the cursor query decides."""
    interface = create_interface(height=25, width=80, is_a_tty=False)
    reply = iter(b"\x1b[40;120R")

    with patch('red.terminal.os.write', side_effect=lambda fd, data: len(data)) as write, \
            patch('red.terminal.os.read', side_effect=lambda fd, n: bytes([next(reply)])):
        assert interface.window_size() == (40, 120)

    sent = b"".join(bytes(call.args[1]) for call in write.call_args_list)
    assert sent == b"\x1b[999C\x1b[999B\x1b[6n"


def test_window_size_queries_cursor_on_zero_width():
    interface = create_interface(width=0)
    with patch.object(interface, 'cursor_position_size', return_value=(50, 90)) as query:
        assert interface.window_size() == (50, 90)
    query.assert_called_once_with()


def test_window_size_falls_back_to_cursor_query():
    terminal = ScriptedTerminal(b"\x1b[48;132R", rows=0, cols=0)

    assert terminal.window_size() == (48, 132)
    assert terminal.output == b"\x1b[999C\x1b[999B\x1b[6n"


def test_bad_cursor_reply_is_fatal():
    terminal = ScriptedTerminal(b"garbage", rows=0, cols=0)

    with pytest.raises(FatalError) as excinfo:
        terminal.window_size()
    assert excinfo.value.context == "window_size"


def test_clear_screen():
    terminal = ScriptedTerminal()
    terminal.clear_screen()
    assert terminal.output == b"\x1b[2J\x1b[H"
