"""Command pattern implementation for key bindings and prompt commands."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence, TYPE_CHECKING

from .constants import EditorConstants
from .keyboard import Key, ctrl_key

if TYPE_CHECKING:
    from .editor import Editor

logger = logging.getLogger(__name__)


class EditorCommand(ABC):
    """Base class for key-bound commands."""

    @abstractmethod
    def execute(self, editor: 'Editor', key: int) -> bool:
        """Execute the command.

        Args:
            editor: Editor instance
            key: The decoded key that triggered this command

        Returns:
            True if the command modified the document
        """
        pass


class MovementCommand(EditorCommand):
    """Base class for cursor movement commands, active in every mode."""

    def execute(self, editor: 'Editor', key: int) -> bool:
        self._move(editor, key)
        return False

    @abstractmethod
    def _move(self, editor: 'Editor', key: int):
        """Perform the movement."""
        pass


class ArrowCommand(MovementCommand):
    def _move(self, editor, key):
        editor.move_cursor(key)


class HomeCommand(MovementCommand):
    def _move(self, editor, key):
        editor.cursor.x = 0


class EndCommand(MovementCommand):
    def _move(self, editor, key):
        row = editor.document.row_at(editor.cursor.y)
        if row is not None:
            editor.cursor.x = row.size


class PageUpCommand(MovementCommand):
    def _move(self, editor, key):
        editor.cursor.y = editor.viewport.row_offset
        for _ in range(editor.screen_rows):
            editor.move_cursor(Key.ARROW_UP)


class PageDownCommand(MovementCommand):
    def _move(self, editor, key):
        bottom = editor.viewport.row_offset + editor.screen_rows - 1
        editor.cursor.y = min(bottom, editor.document.row_count)
        for _ in range(editor.screen_rows):
            editor.move_cursor(Key.ARROW_DOWN)


class EditCommand(EditorCommand):
    """Base class for editing commands; they only act in Edit mode."""

    def execute(self, editor: 'Editor', key: int) -> bool:
        if not editor.is_editing:
            return False
        self._edit(editor, key)
        return True

    @abstractmethod
    def _edit(self, editor: 'Editor', key: int):
        """Perform the edit."""
        pass


class InsertNewlineCommand(EditCommand):
    def _edit(self, editor, key):
        editor.insert_newline()


class BackspaceCommand(EditCommand):
    def _edit(self, editor, key):
        editor.delete_char()


class DeleteForwardCommand(EditCommand):
    def _edit(self, editor, key):
        editor.move_cursor(Key.ARROW_RIGHT)
        editor.delete_char()


class InsertCharCommand(EditCommand):
    def _edit(self, editor, key):
        editor.insert_char(key)


class SystemCommand(EditorCommand):
    """Base class for mode switches, quit and the command prompt."""

    def execute(self, editor: 'Editor', key: int) -> bool:
        self._execute_system(editor, key)
        return False

    @abstractmethod
    def _execute_system(self, editor: 'Editor', key: int):
        """Perform the system action."""
        pass


class ReadModeCommand(SystemCommand):
    def _execute_system(self, editor, key):
        editor.set_mode_read()


class EditModeCommand(SystemCommand):
    def _execute_system(self, editor, key):
        editor.set_mode_edit()


class QuitCommand(SystemCommand):
    def _execute_system(self, editor, key):
        editor.quit()


class CommandPromptCommand(SystemCommand):
    def _execute_system(self, editor, key):
        editor.process_command()


class RedrawCommand(SystemCommand):
    def _execute_system(self, editor, key):
        # The main loop repaints after every key.
        pass


def is_insertable(key: int) -> bool:
    """Printable ASCII and tab are typed into the document."""
    return key == ord('\t') or 32 <= key < 127


class CommandRegistry:
    """Registry for mapping keys to commands."""

    def __init__(self):
        self._commands: Dict[int, EditorCommand] = {}
        self._setup_default_commands()

    def _setup_default_commands(self):
        """Set up the default key mappings."""
        # Mode switches and system commands
        self.register(ctrl_key('r'), ReadModeCommand())
        self.register(ctrl_key('e'), EditModeCommand())
        self.register(ctrl_key('q'), QuitCommand())
        self.register(ctrl_key('c'), CommandPromptCommand())
        self.register(ctrl_key('l'), RedrawCommand())

        # Movement commands
        arrows = ArrowCommand()
        for key in (Key.ARROW_UP, Key.ARROW_DOWN, Key.ARROW_LEFT, Key.ARROW_RIGHT):
            self.register(key, arrows)
        self.register(Key.HOME_KEY, HomeCommand())
        self.register(Key.END_KEY, EndCommand())
        self.register(Key.PAGE_UP, PageUpCommand())
        self.register(Key.PAGE_DOWN, PageDownCommand())

        # Editing commands
        self.register(Key.ENTER, InsertNewlineCommand())
        backspace = BackspaceCommand()
        self.register(Key.BACKSPACE, backspace)
        self.register(ctrl_key('h'), backspace)
        self.register(Key.DEL_KEY, DeleteForwardCommand())

    def register(self, key: int, command: EditorCommand):
        """Register a command for a key."""
        self._commands[key] = command

    def get_command(self, key: int) -> Optional[EditorCommand]:
        return self._commands.get(key)

    def execute(self, editor: 'Editor', key: int) -> bool:
        """Execute the command for the given key.

        Returns:
            True if the document was modified
        """
        command = self.get_command(key)
        if command:
            return command.execute(editor, key)

        # Handle regular text input
        if is_insertable(key):
            return InsertCharCommand().execute(editor, key)

        return False


class PromptCommand(ABC):
    """A named command typed at the command prompt."""

    names: Sequence[str] = ()

    @abstractmethod
    def run(self, editor: 'Editor', args: list[str]):
        """Run with the words that followed the command name."""
        pass


class SaveCommand(PromptCommand):
    names = ("save", "s")

    def run(self, editor, args):
        editor.save()


class GotoLineCommand(PromptCommand):
    names = ("line", "l", "n")

    def run(self, editor, args):
        if not args or not args[0].isdigit():
            editor.set_status(EditorConstants.LINE_USAGE_MESSAGE)
            return
        # Clamped by the next move or frame, not here.
        editor.cursor.y = int(args[0])


class FindCommand(PromptCommand):
    names = ("find", "f")

    def run(self, editor, args):
        query = " ".join(args).encode("ascii", errors="replace")
        if not query:
            editor.set_status(EditorConstants.FIND_USAGE_MESSAGE)
            return
        incidences = editor.find(query)
        editor.set_status(EditorConstants.FIND_RESULT_MESSAGE.format(incidences))


class PromptCommandRegistry:
    """Maps command names typed at the prompt to PromptCommands."""

    def __init__(self):
        self._commands: Dict[str, PromptCommand] = {}
        for command in (SaveCommand(), GotoLineCommand(), FindCommand()):
            self.register(command)

    def register(self, command: PromptCommand):
        for name in command.names:
            self._commands[name] = command

    def get_command(self, name: str) -> Optional[PromptCommand]:
        return self._commands.get(name)

    def dispatch(self, editor: 'Editor', request: str):
        """Split ``request`` on spaces and run the named command."""
        words = request.split()
        name = words[0] if words else ""
        command = self.get_command(name)
        if command is None:
            logger.debug("Unknown command %r", request)
            editor.set_status(EditorConstants.UNKNOWN_COMMAND_MESSAGE.format(name))
            return
        logger.debug("Running command %r", request)
        command.run(editor, words[1:])
