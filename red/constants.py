"""Constants and configuration for the red editor."""


class EditorConstants:
    """Central configuration constants for the editor."""

    # Document layout
    TAB_STOP = 4  # Tabs render up to the next multiple of this column

    # Screen layout
    RESERVED_ROWS = 2  # Status bar + message bar
    FILENAME_WIDTH = 20  # Max characters of the file name in the status bar
    NEW_DOCUMENT_NAME = "[New document]"

    # Status messages
    STATUS_TIMEOUT = 5  # Seconds a status message stays visible
    STATUS_MAX_LENGTH = 79
    WELCOME_MESSAGE = "Ctrl + [Q-Quit, S-Save, E-Edit, C-Command, R-Read]"
    COMMAND_PROMPT = "/%s"
    SAVE_AS_PROMPT = "Save as: %s"
    SAVE_CANCELLED_MESSAGE = "Cancelled operation!"
    SAVE_OK_MESSAGE = "{} bytes written to disk"
    SAVE_ERROR_MESSAGE = "Can't save! I/O error: {}"
    FIND_RESULT_MESSAGE = "{} incidences found"
    FIND_USAGE_MESSAGE = "A query is required! - find [a-zA-Z1-9]"
    LINE_USAGE_MESSAGE = "A line number is required! - line [0-9]"
    UNKNOWN_COMMAND_MESSAGE = "Command not found: {}"

    # Terminal input
    READ_TIMEOUT_DECISECONDS = 1  # VTIME: read() returns after 100ms
    CURSOR_REPLY_MAX = 31  # Max bytes accepted for an ESC[6n reply

    # Escape sequences
    CLEAR_SCREEN = b"\x1b[2J"
    CURSOR_HOME = b"\x1b[H"
    CLEAR_LINE = b"\x1b[K"
    HIDE_CURSOR = b"\x1b[?25l"
    SHOW_CURSOR = b"\x1b[?25h"
    INVERT_COLORS = b"\x1b[7m"
    RESET_ATTRIBUTES = b"\x1b[m"
    DEFAULT_COLOR = b"\x1b[39m"
    CURSOR_TO_CORNER = b"\x1b[999C\x1b[999B"
    QUERY_CURSOR = b"\x1b[6n"

    # Logging
    LOG_ENV_VAR = "RED_LOG"
