"""Screen rendering: viewport scrolling and frame assembly."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .constants import EditorConstants
from .syntax import Highlight, color_code

if TYPE_CHECKING:
    from .editor import Editor
    from .model import Row


@dataclass
class Viewport:
    """Top-left corner of the visible part of the document."""
    row_offset: int = 0
    col_offset: int = 0

    def scroll(self, cursor_x: int, cursor_y: int, rows: int, cols: int):
        """Move the window just enough to keep the cursor visible."""
        if cursor_y < self.row_offset:
            self.row_offset = cursor_y
        if cursor_y >= self.row_offset + rows:
            self.row_offset = cursor_y - rows + 1
        if cursor_x < self.col_offset:
            self.col_offset = cursor_x
        if cursor_x >= self.col_offset + cols:
            self.col_offset = cursor_x - cols + 1


def render_row_bytes(row: "Row", col_offset: int, cols: int) -> bytes:
    """Clip a row's render to the window and add color escapes.

    A color escape is written when the class changes to a colored one, and
    the default color is restored after every byte.
    """
    start = col_offset
    size = max(0, min(row.render_size - col_offset, cols))
    chars = row.render[start:start + size]
    highlight = row.highlight[start:start + size]

    out = bytearray()
    current_color = None
    for ch, hl in zip(chars, highlight):
        if hl == Highlight.DEFAULT:
            if current_color is not None:
                current_color = None
                out += EditorConstants.DEFAULT_COLOR
            out.append(ch)
        else:
            color = color_code(hl)
            if color != current_color:
                current_color = color
                out += b"\x1b[%dm" % color
            out.append(ch)
        out += EditorConstants.DEFAULT_COLOR
    return bytes(out)


class ScreenRenderer:
    """Paints complete frames for an Editor onto its terminal."""

    def __init__(self, terminal):
        self.terminal = terminal

    def refresh(self, editor: "Editor"):
        """Scroll to the cursor, then write one frame in a single call."""
        editor.clamp_cursor()
        editor.viewport.scroll(editor.cursor.x, editor.cursor.y,
                               editor.screen_rows, editor.screen_cols)
        self.terminal.write(self.build_frame(editor))

    def build_frame(self, editor: "Editor") -> bytes:
        frame = bytearray()
        frame += EditorConstants.HIDE_CURSOR
        frame += EditorConstants.CURSOR_HOME

        self._draw_rows(editor, frame)
        self._draw_status_bar(editor, frame)
        self._draw_message_bar(editor, frame)

        y = editor.cursor.y - editor.viewport.row_offset + 1
        x = editor.cursor.x - editor.viewport.col_offset + 1
        frame += b"\x1b[%d;%dH" % (y, x)
        frame += EditorConstants.SHOW_CURSOR
        return bytes(frame)

    def _draw_rows(self, editor: "Editor", frame: bytearray):
        doc = editor.document
        for r in range(editor.screen_rows):
            index = r + editor.viewport.row_offset
            if index >= doc.row_count:
                frame += b"~"
            else:
                frame += render_row_bytes(doc[index], editor.viewport.col_offset, editor.screen_cols)
            frame += EditorConstants.CLEAR_LINE
            frame += b"\r\n"

    def _draw_status_bar(self, editor: "Editor", frame: bytearray):
        name = editor.filename or EditorConstants.NEW_DOCUMENT_NAME
        name = name[:EditorConstants.FILENAME_WIDTH]
        status = f" {name} - {editor.document.row_count} lines [{editor.mode.label}]"
        status = status.encode("utf-8", errors="replace")[:editor.screen_cols]

        frame += EditorConstants.INVERT_COLORS
        frame += status.ljust(editor.screen_cols)
        frame += EditorConstants.RESET_ATTRIBUTES
        frame += b"\r\n"

    def _draw_message_bar(self, editor: "Editor", frame: bytearray):
        frame += EditorConstants.CLEAR_LINE
        if editor.status_visible():
            message = editor.status_message.encode("utf-8", errors="replace")
            frame += message[:editor.screen_cols]
