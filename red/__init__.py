"""red - a small modal terminal text editor."""

import logging

from .model import Cursor, Document, Row
from .syntax import Highlight
from .view import ScreenRenderer, Viewport

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'Cursor',
    'Document',
    'Row',
    'Highlight',
    'ScreenRenderer',
    'Viewport',
]
