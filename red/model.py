from dataclasses import dataclass
from typing import Iterable, Optional

from .constants import EditorConstants
from .syntax import Highlight, highlight_row


@dataclass
class Cursor:
    """Cursor position in content coordinates.

    ``y`` may equal the row count (the append position). ``x`` is a byte
    offset into the row content.
    """
    x: int = 0
    y: int = 0


class Row:
    """One line of the document.

    ``content`` is owned by the row. ``render`` and ``highlight`` are derived
    from it and rebuilt by ``update()`` after every mutation.
    """

    content: bytearray
    render: bytes
    highlight: list[Highlight]

    def __init__(self, content: bytes = b"", tab_stop: int = EditorConstants.TAB_STOP):
        self.content = bytearray(content)
        self.tab_stop = tab_stop
        self.render = b""
        self.highlight = []
        self.update()

    def __repr__(self):
        return f"Row({bytes(self.content)!r})"

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def render_size(self) -> int:
        return len(self.render)

    def update(self):
        """Rebuild the render form and its highlight classes."""
        rendered = bytearray()
        for b in self.content:
            if b == 0x09:
                rendered.append(0x20)
                while len(rendered) % self.tab_stop != 0:
                    rendered.append(0x20)
            else:
                rendered.append(b)
        self.render = bytes(rendered)
        self.highlight = highlight_row(self.render)

    def insert(self, col: int, byte: int):
        if col < 0 or col > self.size:
            col = self.size
        self.content.insert(col, byte)
        self.update()

    def delete(self, col: int) -> bool:
        if col < 0 or col >= self.size:
            return False
        del self.content[col]
        self.update()
        return True

    def append(self, data: bytes):
        self.content.extend(data)
        self.update()

    def truncate(self, col: int):
        del self.content[col:]
        self.update()


class Document:
    """Ordered rows of the document being edited.

    Row indices double as line numbers. Every operation checks its indices
    and silently ignores out-of-range requests.
    """

    rows: list[Row]

    def __init__(self, tab_stop: int = EditorConstants.TAB_STOP):
        self.rows = []
        self.tab_stop = tab_stop

    @classmethod
    def from_lines(cls, lines: Iterable[bytes], tab_stop: int = EditorConstants.TAB_STOP) -> "Document":
        doc = cls(tab_stop=tab_stop)
        for line in lines:
            doc.insert_row(doc.row_count, line)
        return doc

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def __len__(self):
        return len(self.rows)

    def __getitem__(self, index: int) -> Row:
        return self.rows[index]

    def row_at(self, index: int) -> Optional[Row]:
        """Return the row at ``index``, or None past either end."""
        if 0 <= index < self.row_count:
            return self.rows[index]
        return None

    def lines(self) -> list[bytes]:
        return [bytes(row.content) for row in self.rows]

    def insert_row(self, index: int, data: bytes = b""):
        if index < 0 or index > self.row_count:
            return
        self.rows.insert(index, Row(data, tab_stop=self.tab_stop))

    def delete_row(self, index: int):
        if index < 0 or index >= self.row_count:
            return
        del self.rows[index]

    def append_to_row(self, index: int, data: bytes):
        row = self.row_at(index)
        if row is not None:
            row.append(data)

    def insert_char(self, row_index: int, col: int, byte: int):
        row = self.row_at(row_index)
        if row is not None:
            row.insert(col, byte)

    def delete_char(self, row_index: int, col: int) -> bool:
        row = self.row_at(row_index)
        if row is None:
            return False
        return row.delete(col)

    def split_row(self, row_index: int, col: int):
        """Move the bytes after ``col`` into a new row below ``row_index``."""
        row = self.row_at(row_index)
        if row is None or col < 0 or col > row.size:
            return
        self.insert_row(row_index + 1, bytes(row.content[col:]))
        row.truncate(col)

    def join_row(self, row_index: int) -> Optional[int]:
        """Merge a row into its predecessor.

        Returns:
            The column in the previous row where the merged text starts, or
            None if there was nothing to join.
        """
        if row_index < 1 or row_index >= self.row_count:
            return None
        previous = self.rows[row_index - 1]
        join_col = previous.size
        previous.append(bytes(self.rows[row_index].content))
        self.delete_row(row_index)
        return join_col

    def serialize(self) -> bytes:
        """Concatenate all rows, each followed by a newline."""
        return b"".join(bytes(row.content) + b"\n" for row in self.rows)
