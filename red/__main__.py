"""red CLI entry point.

Allows running via `python -m red` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from .constants import EditorConstants
from .errors import FatalError


def _configure_logging() -> None:
    # The screen belongs to the editor, so logs only ever go to a file.
    log_file = os.environ.get(EditorConstants.LOG_ENV_VAR)
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )


def _restore_terminal(terminal) -> None:
    # Already failing; the first error is the one to report.
    for step in (terminal.exit_raw_mode, terminal.clear_screen):
        try:
            step()
        except FatalError:
            pass


def main(argv: Optional[list[str]] = None) -> int:
    """Run the editor on an optional file and return the exit status."""
    args = sys.argv[1:] if argv is None else argv
    _configure_logging()

    # Lazy import so the terminal stack loads only when the editor runs
    from .editor import Editor
    editor = Editor()
    try:
        if args:
            editor.load_file(args[0])
        editor.run()
    except FatalError as e:
        logging.getLogger(__name__).error("Fatal: %s", e)
        _restore_terminal(editor.terminal)
        print(e, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
