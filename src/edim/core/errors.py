# edim/core/errors.py
"""Exception types raised by the edim core.

Only ``AddressingError`` signals a programming-contract violation; the other
errors are recoverable conditions that the session turns into status
messages.
"""

from typing import Optional


class EdimError(Exception):
    """Base class for all edim errors."""


class AddressingError(EdimError, IndexError):
    """Raised when a row or column lies outside the document."""

    def __init__(
        self, message: str, *, row: Optional[int] = None, column: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.row = row
        self.column = column


class FileWriteError(EdimError):
    """Raised when a document cannot be written to its destination."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not write '{path}': {reason}")
        self.path = path
        self.reason = reason


class ConfigOpenError(EdimError):
    """Raised when a highlight rule file cannot be opened."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not open config file '{path}': {reason}")
        self.path = path
        self.reason = reason
