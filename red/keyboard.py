"""Keyboard input decoding from raw terminal bytes."""

from enum import IntEnum
from typing import Optional


class Key(IntEnum):
    """Key codes returned by KeyboardHandler.

    Plain bytes are returned as their integer value; the members above 999
    are logical keys decoded from escape sequences.
    """
    ENTER = 13
    ESCAPE = 27
    BACKSPACE = 127
    ARROW_UP = 1000
    ARROW_DOWN = 1001
    ARROW_RIGHT = 1002
    ARROW_LEFT = 1003
    DEL_KEY = 1004
    HOME_KEY = 1005
    END_KEY = 1006
    PAGE_UP = 1007
    PAGE_DOWN = 1008


def ctrl_key(ch: str) -> int:
    """Return the byte a terminal sends for Ctrl plus ``ch``."""
    return ord(ch) & 0x1f


# ESC [ <digit> ~
_TILDE_KEYS = {
    ord('1'): Key.HOME_KEY,
    ord('3'): Key.DEL_KEY,
    ord('4'): Key.END_KEY,
    ord('5'): Key.PAGE_UP,
    ord('6'): Key.PAGE_DOWN,
    ord('7'): Key.HOME_KEY,
    ord('8'): Key.END_KEY,
}

# ESC [ <letter>
_CSI_KEYS = {
    ord('A'): Key.ARROW_UP,
    ord('B'): Key.ARROW_DOWN,
    ord('C'): Key.ARROW_RIGHT,
    ord('D'): Key.ARROW_LEFT,
    ord('H'): Key.HOME_KEY,
    ord('F'): Key.END_KEY,
}

# ESC O <letter>
_SS3_KEYS = {
    ord('H'): Key.HOME_KEY,
    ord('F'): Key.END_KEY,
}


class KeyboardHandler:
    """Reads one logical key at a time from a terminal driver."""

    def __init__(self, terminal_interface):
        """Initialize with a terminal driver."""
        self.terminal = terminal_interface

    def read_key(self) -> int:
        """Block until a key arrives and return it.

        Escape sequences for arrows, Home/End, PageUp/PageDown and Delete
        are decoded; an incomplete or unknown sequence reads as ESC.
        """
        c = None
        while c is None:
            c = self.terminal.read_byte()

        if c != Key.ESCAPE:
            return c
        return self._decode_escape()

    def _decode_escape(self) -> int:
        first = self.terminal.read_byte()
        if first is None:
            return Key.ESCAPE
        second = self.terminal.read_byte()
        if second is None:
            return Key.ESCAPE

        if first == ord('['):
            if ord('0') <= second <= ord('9'):
                third = self.terminal.read_byte()
                if third == ord('~'):
                    return _TILDE_KEYS.get(second, Key.ESCAPE)
                return Key.ESCAPE
            return _CSI_KEYS.get(second, Key.ESCAPE)
        if first == ord('O'):
            return _SS3_KEYS.get(second, Key.ESCAPE)
        return Key.ESCAPE


def key_name(key: int) -> Optional[str]:
    """Readable name of a logical key, or None for plain bytes."""
    try:
        return Key(key).name
    except ValueError:
        return None
