# src/edim/core/__init__.py
"""Public facade for edim.core: re-export the editing model from its CamelCase modules."""

from .Buffer import Buffer  # noqa: F401
from .Classifier import Category, Classifier, RuleSet, Run  # noqa: F401
from .Cursor import Cursor, Viewport  # noqa: F401
from .EditorSession import Action, EditorSession, Event, EventKind  # noqa: F401
from .errors import AddressingError, ConfigOpenError, EdimError, FileWriteError  # noqa: F401
from .FileIO import Document  # noqa: F401
from .Line import Line  # noqa: F401


__all__ = [
    "Action",
    "AddressingError",
    "Buffer",
    "Category",
    "Classifier",
    "ConfigOpenError",
    "Cursor",
    "Document",
    "EdimError",
    "EditorSession",
    "Event",
    "EventKind",
    "FileWriteError",
    "Line",
    "RuleSet",
    "Run",
    "Viewport",
]
