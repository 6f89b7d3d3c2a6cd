"""Terminal drivers: raw mode, byte input, output and geometry.

TerminalInterface talks to the real tty with termios and uses Blessed for
the window size. ScriptedTerminal replays canned input so the editor can
be driven without a terminal.
"""

import atexit
import errno
import logging
import os
import re
import sys
import termios
from abc import ABC, abstractmethod
from typing import Optional

import blessed

from .constants import EditorConstants
from .errors import FatalError

logger = logging.getLogger(__name__)

_CURSOR_REPLY = re.compile(rb"^\x1b\[(\d+);(\d+)$")


class TerminalDriver(ABC):
    """Interface the editor uses to reach the terminal."""

    @abstractmethod
    def enter_raw_mode(self):
        """Save the current attributes and switch the tty to raw mode."""

    @abstractmethod
    def exit_raw_mode(self):
        """Restore the attributes saved by enter_raw_mode."""

    @abstractmethod
    def read_byte(self) -> Optional[int]:
        """Return one input byte, or None if the read timed out."""

    @abstractmethod
    def write(self, data: bytes):
        """Write ``data`` in a single output call."""

    @abstractmethod
    def window_size(self) -> tuple[int, int]:
        """Return the terminal size as (rows, cols)."""

    def clear_screen(self):
        self.write(EditorConstants.CLEAR_SCREEN + EditorConstants.CURSOR_HOME)

    def parse_cursor_reply(self) -> tuple[int, int]:
        """Read an ``ESC[<rows>;<cols>R`` reply and return (rows, cols)."""
        reply = bytearray()
        while len(reply) < EditorConstants.CURSOR_REPLY_MAX:
            b = self.read_byte()
            if b is None or b == ord('R'):
                break
            reply.append(b)
        match = _CURSOR_REPLY.match(bytes(reply))
        if not match:
            raise FatalError("window_size", f"bad cursor position reply {bytes(reply)!r}")
        return int(match.group(1)), int(match.group(2))

    def cursor_position_size(self) -> tuple[int, int]:
        """Measure the screen by parking the cursor in the bottom-right corner."""
        self.write(EditorConstants.CURSOR_TO_CORNER + EditorConstants.QUERY_CURSOR)
        return self.parse_cursor_reply()


class TerminalInterface(TerminalDriver):
    """Handles the real terminal through termios, os.read/os.write and Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None,
                 stdin_fd: Optional[int] = None, stdout_fd: Optional[int] = None):
        """Initialize with a Blessed terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.stdin_fd = sys.stdin.fileno() if stdin_fd is None else stdin_fd
        self.stdout_fd = sys.stdout.fileno() if stdout_fd is None else stdout_fd
        self._saved_attributes: Optional[list] = None
        self._atexit_registered = False

    def enter_raw_mode(self):
        try:
            self._saved_attributes = termios.tcgetattr(self.stdin_fd)
        except (termios.error, OSError) as e:
            raise FatalError("tcgetattr", e) from e

        if not self._atexit_registered:
            atexit.register(self.exit_raw_mode)
            self._atexit_registered = True

        raw = termios.tcgetattr(self.stdin_fd)
        raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
        raw[1] &= ~termios.OPOST
        raw[2] |= termios.CS8
        raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
        raw[6][termios.VMIN] = 0
        raw[6][termios.VTIME] = EditorConstants.READ_TIMEOUT_DECISECONDS
        try:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, raw)
        except (termios.error, OSError) as e:
            raise FatalError("tcsetattr", e) from e
        logger.debug("Entered raw mode on fd %d", self.stdin_fd)

    def exit_raw_mode(self):
        if self._saved_attributes is None:
            return
        saved, self._saved_attributes = self._saved_attributes, None
        try:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, saved)
        except (termios.error, OSError) as e:
            raise FatalError("tcsetattr", e) from e
        logger.debug("Restored terminal attributes")

    def read_byte(self) -> Optional[int]:
        try:
            data = os.read(self.stdin_fd, 1)
        except OSError as e:
            if e.errno in (errno.EAGAIN, errno.EINTR):
                return None
            raise FatalError("read", e) from e
        if not data:
            return None
        return data[0]

    def write(self, data: bytes):
        view = memoryview(data)
        try:
            while view:
                written = os.write(self.stdout_fd, view)
                view = view[written:]
        except OSError as e:
            raise FatalError("write", e) from e

    def window_size(self) -> tuple[int, int]:
        # Off a tty Blessed reports LINES/COLUMNS or 80x25, not the real size
        rows, cols = self.term.height, self.term.width
        if not self.term.is_a_tty or not cols:
            logger.debug("No usable terminal geometry, querying cursor position")
            return self.cursor_position_size()
        return rows, cols


class ScriptedTerminal(TerminalDriver):
    """In-memory terminal fed from a byte script.

    Everything the editor writes is kept in ``output``. Once the script runs
    dry, reads time out; after ``idle_limit`` consecutive timeouts an
    EOFError is raised so a loop waiting for more input cannot spin forever.
    """

    def __init__(self, script: bytes = b"", rows: int = 24, cols: int = 80, idle_limit: int = 16):
        self.script = bytearray(script)
        self.rows = rows
        self.cols = cols
        self.idle_limit = idle_limit
        self.output = bytearray()
        self.writes: list[bytes] = []
        self.raw = False
        self._idle = 0

    def feed(self, data: bytes):
        self.script.extend(data)

    def enter_raw_mode(self):
        self.raw = True

    def exit_raw_mode(self):
        self.raw = False

    def read_byte(self) -> Optional[int]:
        if self.script:
            self._idle = 0
            return self.script.pop(0)
        self._idle += 1
        if self._idle > self.idle_limit:
            raise EOFError("input script exhausted")
        return None

    def write(self, data: bytes):
        self.writes.append(bytes(data))
        self.output.extend(data)

    def window_size(self) -> tuple[int, int]:
        if not self.cols:
            return self.cursor_position_size()
        return self.rows, self.cols

    @property
    def last_frame(self) -> bytes:
        return self.writes[-1] if self.writes else b""
