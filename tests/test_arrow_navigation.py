"""Tests for cursor movement keys in every mode."""

import pytest

from red.editor import Editor, Mode
from red.keyboard import Key
from red.model import Document
from red.terminal import ScriptedTerminal


def create_editor(lines, rows=7, cols=40, mode=Mode.READ):
    terminal = ScriptedTerminal(rows=rows, cols=cols)
    editor = Editor(terminal)
    editor.update_window_size()
    editor.document = Document.from_lines(lines)
    editor.mode = mode
    return editor


def press(editor, key):
    editor.command_registry.execute(editor, key)


def position(editor):
    return editor.cursor.x, editor.cursor.y


def test_right_wraps_to_next_row():
    editor = create_editor([b"abc", b"de"])
    editor.cursor.x = 3

    press(editor, Key.ARROW_RIGHT)

    assert position(editor) == (0, 1)


def test_right_at_end_of_last_row_moves_to_append_position():
    editor = create_editor([b"abc", b"de"])
    editor.cursor.x, editor.cursor.y = 2, 1

    press(editor, Key.ARROW_RIGHT)
    assert position(editor) == (0, 2)

    press(editor, Key.ARROW_RIGHT)
    assert position(editor) == (0, 2)


def test_left_wraps_to_end_of_previous_row():
    editor = create_editor([b"abc", b"de"])
    editor.cursor.y = 1

    press(editor, Key.ARROW_LEFT)

    assert position(editor) == (3, 0)


def test_left_at_document_start_stays():
    editor = create_editor([b"abc"])

    press(editor, Key.ARROW_LEFT)

    assert position(editor) == (0, 0)


def test_down_clamps_column_to_shorter_row():
    editor = create_editor([b"a long row", b"tiny"])
    editor.cursor.x = 8

    press(editor, Key.ARROW_DOWN)

    assert position(editor) == (4, 1)


def test_up_clamps_column_to_shorter_row():
    editor = create_editor([b"ab", b"abcdef"])
    editor.cursor.x, editor.cursor.y = 6, 1

    press(editor, Key.ARROW_UP)

    assert position(editor) == (2, 0)


def test_down_past_last_row_clamps_column_to_zero():
    editor = create_editor([b"abc"])
    editor.cursor.x = 3

    press(editor, Key.ARROW_DOWN)

    assert position(editor) == (0, 1)


@pytest.mark.parametrize("key,start,expected", [
    (Key.ARROW_UP, (0, 0), (0, 0)),
    (Key.ARROW_DOWN, (0, 2), (0, 2)),
])
def test_vertical_moves_stay_in_range(key, start, expected):
    editor = create_editor([b"a", b"b"])
    editor.cursor.x, editor.cursor.y = start

    press(editor, key)

    assert position(editor) == expected


def test_home_and_end():
    editor = create_editor([b"hello"])
    editor.cursor.x = 2

    press(editor, Key.END_KEY)
    assert position(editor) == (5, 0)

    press(editor, Key.HOME_KEY)
    assert position(editor) == (0, 0)


def test_end_past_document_does_nothing():
    editor = create_editor([b"hello"])
    editor.cursor.y = 1

    press(editor, Key.END_KEY)

    assert position(editor) == (0, 1)


def test_page_down_moves_a_screen():
    editor = create_editor([b"row %d" % i for i in range(20)])  # five text rows

    press(editor, Key.PAGE_DOWN)

    # Bottom of the window (row 4), then five more rows
    assert editor.cursor.y == 9


def test_page_down_stops_at_append_position():
    editor = create_editor([b"a", b"b", b"c"])

    press(editor, Key.PAGE_DOWN)

    assert editor.cursor.y == 3


def test_page_up_moves_a_screen():
    editor = create_editor([b"row %d" % i for i in range(20)])
    editor.viewport.row_offset = 10
    editor.cursor.y = 12

    press(editor, Key.PAGE_UP)

    assert editor.cursor.y == 5


def test_page_up_stops_at_top():
    editor = create_editor([b"row %d" % i for i in range(20)])
    editor.viewport.row_offset = 2
    editor.cursor.y = 4

    press(editor, Key.PAGE_UP)

    assert editor.cursor.y == 0


def test_navigation_works_in_edit_mode():
    editor = create_editor([b"abc", b"de"], mode=Mode.EDIT)

    press(editor, Key.ARROW_DOWN)
    press(editor, Key.END_KEY)

    assert position(editor) == (2, 1)
    assert editor.document.lines() == [b"abc", b"de"]
