"""Highlight classification for rendered row bytes."""

from enum import IntEnum


class Highlight(IntEnum):
    DEFAULT = 0
    NUMBER = 1


_COLOR_CODES = {
    Highlight.NUMBER: 31,
}
_DEFAULT_COLOR_CODE = 39

_DIGITS = frozenset(b"0123456789")


def highlight_row(render: bytes) -> list[Highlight]:
    """Classify every rendered byte.

    Digits are numbers, everything else keeps the default color. The result
    is aligned with ``render``.
    """
    return [Highlight.NUMBER if b in _DIGITS else Highlight.DEFAULT for b in render]


def color_code(highlight: Highlight) -> int:
    """Return the SGR foreground code for a highlight class."""
    return _COLOR_CODES.get(highlight, _DEFAULT_COLOR_CODE)
