"""Main editor controller: state, input dispatch and the event loop."""

import logging
import signal
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from .commands import CommandRegistry, PromptCommandRegistry
from .constants import EditorConstants
from .errors import FatalError
from .fileio import read_rows, write_payload
from .keyboard import Key, KeyboardHandler, ctrl_key, key_name
from .model import Cursor, Document
from .terminal import TerminalDriver, TerminalInterface
from .view import ScreenRenderer, Viewport

logger = logging.getLogger(__name__)


class Mode(Enum):
    READ = "READ_MODE"
    EDIT = "EDIT_MODE"

    @property
    def label(self) -> str:
        return self.value


@dataclass
class PromptState:
    """State of the command-prompt overlay while it is open."""
    template: str
    return_mode: Mode
    buffer: bytearray = field(default_factory=bytearray)

    @property
    def text(self) -> str:
        return self.buffer.decode("ascii", errors="replace")

    def render(self) -> str:
        return self.template % self.text


class Editor:
    """Main text editor application controller."""

    def __init__(self, terminal: Optional[TerminalDriver] = None,
                 clock: Callable[[], float] = time.time):
        """Initialize the editor components.

        Args:
            terminal: Terminal driver; a real TerminalInterface by default.
            clock: Wall clock used to expire status messages.
        """
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyboardHandler(self.terminal)
        self.renderer = ScreenRenderer(self.terminal)
        self.command_registry = CommandRegistry()
        self.prompt_commands = PromptCommandRegistry()
        self.clock = clock

        self.document = Document()
        self.cursor = Cursor()
        self.viewport = Viewport()
        self.mode = Mode.READ
        self.filename: Optional[str] = None
        self.status_message = ""
        self.status_time = 0.0
        self.running = False

        # Filled in by update_window_size() once the terminal is in raw mode
        self.screen_rows = 0
        self.screen_cols = 0
        self._resized = False

    # --- State -----------------------------------------------------------

    @property
    def is_editing(self) -> bool:
        return self.mode == Mode.EDIT

    def set_mode_read(self):
        self.mode = Mode.READ

    def set_mode_edit(self):
        self.mode = Mode.EDIT

    def update_window_size(self):
        """Query the terminal geometry, leaving room for the two bars."""
        rows, cols = self.terminal.window_size()
        self.screen_rows = max(0, rows - EditorConstants.RESERVED_ROWS)
        self.screen_cols = cols

    def set_status(self, message: str):
        self.status_message = message[:EditorConstants.STATUS_MAX_LENGTH]
        self.status_time = self.clock()

    def status_visible(self) -> bool:
        if not self.status_message:
            return False
        return self.clock() - self.status_time < EditorConstants.STATUS_TIMEOUT

    def clamp_cursor(self):
        """Pull the cursor back inside the document."""
        self.cursor.y = max(0, min(self.cursor.y, self.document.row_count))
        row = self.document.row_at(self.cursor.y)
        size = row.size if row is not None else 0
        self.cursor.x = max(0, min(self.cursor.x, size))

    # --- Main loop -------------------------------------------------------

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        self._resized = True

    def _handle_terminate(self, signum, frame):
        del frame  # Unused
        raise SystemExit(128 + signum)

    def _apply_resize(self):
        if self._resized:
            self._resized = False
            self.update_window_size()

    def run(self):
        """Run the main editor loop until quit.

        Raw mode is restored on every way out of this method.

        Raises:
            FatalError: on terminal failure.
        """
        self.terminal.enter_raw_mode()
        self.running = True

        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)
        original_term_handler = signal.signal(signal.SIGTERM, self._handle_terminate)
        try:
            self.update_window_size()
            self.set_status(EditorConstants.WELCOME_MESSAGE)
            while self.running:
                self._apply_resize()
                self.refresh_screen()
                self.process_key()
        finally:
            signal.signal(signal.SIGWINCH, original_winch_handler)
            signal.signal(signal.SIGTERM, original_term_handler)
            self.terminal.exit_raw_mode()

    def refresh_screen(self):
        self.renderer.refresh(self)

    def process_key(self):
        """Read one key and dispatch it."""
        key = self.keyboard.read_key()
        logger.debug("Key %s", key_name(key) or key)
        self.command_registry.execute(self, key)

    def quit(self):
        self.terminal.clear_screen()
        self.running = False

    # --- Cursor movement -------------------------------------------------

    def move_cursor(self, key: int):
        row = self.document.row_at(self.cursor.y)
        if key == Key.ARROW_UP:
            if self.cursor.y != 0:
                self.cursor.y -= 1
        elif key == Key.ARROW_DOWN:
            if self.cursor.y < self.document.row_count:
                self.cursor.y += 1
        elif key == Key.ARROW_RIGHT:
            if row is not None and self.cursor.x < row.size:
                self.cursor.x += 1
            elif row is not None and self.cursor.x == row.size:
                self.cursor.y += 1
                self.cursor.x = 0
        elif key == Key.ARROW_LEFT:
            if self.cursor.x != 0:
                self.cursor.x -= 1
            elif self.cursor.y > 0:
                self.cursor.y -= 1
                previous = self.document.row_at(self.cursor.y)
                self.cursor.x = previous.size if previous is not None else 0

        self.clamp_cursor()

    # --- Editing ---------------------------------------------------------

    def insert_char(self, key: int):
        if self.cursor.y == self.document.row_count:
            self.document.insert_row(self.document.row_count, b"")
        self.document.insert_char(self.cursor.y, self.cursor.x, key)
        self.cursor.x += 1

    def insert_newline(self):
        if self.cursor.x == 0:
            self.document.insert_row(self.cursor.y, b"")
        else:
            self.document.split_row(self.cursor.y, self.cursor.x)
        self.cursor.y += 1
        self.cursor.x = 0

    def delete_char(self):
        """Delete the byte before the cursor, joining rows at column 0."""
        if self.cursor.y >= self.document.row_count:
            return
        if self.cursor.x == 0 and self.cursor.y == 0:
            return

        if self.cursor.x > 0:
            self.document.delete_char(self.cursor.y, self.cursor.x - 1)
            self.cursor.x -= 1
        else:
            join_col = self.document.join_row(self.cursor.y)
            if join_col is not None:
                self.cursor.y -= 1
                self.cursor.x = join_col

    # --- Command prompt --------------------------------------------------

    def prompt(self, template: str) -> Optional[str]:
        """Collect one line of input in the message bar.

        Args:
            template: %-format string; ``%s`` is replaced by the typed text.

        Returns:
            The typed text, or None if the user pressed ESC.
        """
        state = PromptState(template=template, return_mode=self.mode)
        try:
            while True:
                self._apply_resize()
                self.set_status(state.render())
                self.refresh_screen()

                key = self.keyboard.read_key()
                if key == Key.ESCAPE:
                    self.set_status("")
                    return None
                elif key in (Key.DEL_KEY, ctrl_key('h'), Key.BACKSPACE):
                    if state.buffer:
                        del state.buffer[-1]
                elif key == Key.ENTER:
                    if state.buffer:
                        self.set_status("")
                        return state.text
                elif 32 <= key < 127:
                    state.buffer.append(key)
        finally:
            self.mode = state.return_mode

    def process_command(self):
        request = self.prompt(EditorConstants.COMMAND_PROMPT)
        if request is None:
            return
        self.prompt_commands.dispatch(self, request)

    def find(self, query: bytes) -> int:
        """Move the cursor to the first row containing ``query``.

        Rows are scanned from the last to the first and every hit moves the
        cursor, so the lowest-index match is where the cursor ends up.

        Returns:
            Number of rows that contain the query.
        """
        incidences = 0
        for i in range(self.document.row_count - 1, -1, -1):
            match = self.document[i].render.find(query)
            if match != -1:
                self.cursor.y = i
                self.cursor.x = match
                self.viewport.row_offset = self.document.row_count
                incidences += 1
        logger.debug("Find %r: %d rows", query, incidences)
        return incidences

    # --- Files -----------------------------------------------------------

    def load_file(self, filename: str):
        """Load a file into the editor.

        Args:
            filename: Path to file to load

        Raises:
            FatalError: if the file cannot be read.
        """
        self.filename = filename
        try:
            lines = read_rows(filename)
        except OSError as e:
            logger.error("Cannot open %s: %s", filename, e)
            raise FatalError("fopen", e) from e
        for line in lines:
            self.document.insert_row(self.document.row_count, line)
        logger.info("Loaded %s (%d rows)", filename, self.document.row_count)

    def save(self) -> bool:
        """Write the document to its file, asking for a name if it has none.

        Returns:
            True if save succeeded, False otherwise
        """
        if not self.filename:
            self.filename = self.prompt(EditorConstants.SAVE_AS_PROMPT)
        if not self.filename:
            self.set_status(EditorConstants.SAVE_CANCELLED_MESSAGE)
            return False

        payload = self.document.serialize()
        try:
            written = write_payload(self.filename, payload)
        except OSError as e:
            logger.warning("Saving %s failed: %s", self.filename, e)
            self.set_status(EditorConstants.SAVE_ERROR_MESSAGE.format(e.strerror or e))
            return False

        logger.info("Saved %d bytes to %s", written, self.filename)
        self.set_status(EditorConstants.SAVE_OK_MESSAGE.format(written))
        return True
