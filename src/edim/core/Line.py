# edim/core/Line.py
"""Line: a single editable text record of the document.

A Line owns its text and exposes the handful of mutators the Buffer needs.
Every mutator replaces ``text`` in one assignment, so the length always
matches the text outside of a call.
"""

import logging

from edim.core.errors import AddressingError

logger = logging.getLogger("edim.line")


class Line:
    """A mutable run of characters without a line terminator."""

    __slots__ = ("text",)

    def __init__(self, text: str = "") -> None:
        self.text: str = text

    @property
    def length(self) -> int:
        return len(self.text)

    def __len__(self) -> int:
        return len(self.text)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Line({self.text!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Line):
            return self.text == other.text
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def _check_column(self, column: int, upper: int) -> None:
        if column < 0 or column > upper:
            raise AddressingError(
                f"Column {column} outside 0..{upper}", column=column
            )

    def insert_at(self, column: int, char: str) -> None:
        """Insert ``char`` before position ``column``.

        ``column`` may equal the length (append). Anything beyond that is a
        caller error: the cursor layer clamps before it gets here.

        Raises:
            ValueError: ``char`` is not exactly one character, or is ``\\n``.
        """
        if len(char) != 1 or char == "\n":
            raise ValueError(f"insert_at expects one non-newline character, got {char!r}")
        self._check_column(column, len(self.text))
        self.text = self.text[:column] + char + self.text[column:]

    def delete_at(self, column: int) -> bool:
        """Remove the character at ``column``; ``False`` when out of range."""
        if column < 0 or column >= len(self.text):
            logger.debug("delete_at: column %d out of range (len %d)", column, len(self.text))
            return False
        self.text = self.text[:column] + self.text[column + 1 :]
        return True

    def split_at(self, column: int) -> "Line":
        """Keep ``text[:column]`` in place and return the rest as a new Line."""
        self._check_column(column, len(self.text))
        suffix = Line(self.text[column:])
        self.text = self.text[:column]
        return suffix

    def append_text(self, other_text: str) -> None:
        self.text = self.text + other_text
