# edim/core/Buffer.py
"""edim.core.Buffer
===================

The Buffer is the ordered collection of Lines that forms one document. It is
the only owner of its Line objects: callers address lines by row index and
never keep a Line across a structural edit.

Invariant: the Buffer always holds at least one Line. An empty document is a
single zero-length Line.

Structural operations:
    - ``split_line(row, column)``: the Enter key.
    - ``merge_with_previous(row)``: Backspace at column 0.
    - ``insert_line_after``, ``remove_line``, ``append_line``.

Character operations delegate to the addressed Line.

Loading and saving go through :mod:`edim.core.FileIO`, which owns encoding
detection and the on-disk format.
"""

import logging
from typing import Iterable, Iterator, Optional

from edim.core.errors import AddressingError
from edim.core.Line import Line

logger = logging.getLogger("edim.buffer")


class Buffer:
    """Ordered, exclusively owned sequence of :class:`Line` objects.

    Attributes:
        is_new (bool): True when the Buffer was produced by ``load_from`` for
            a path that did not exist yet.
    """

    def __init__(self, lines: Optional[Iterable[Line]] = None) -> None:
        self._lines: list[Line] = list(lines) if lines is not None else []
        if not self._lines:
            self._lines.append(Line())
        self.is_new: bool = False

    @classmethod
    def from_lines(cls, texts: Iterable[str]) -> "Buffer":
        return cls(Line(text) for text in texts)

    # --- Loading / saving ---
    @classmethod
    def load_from(cls, path: str, encoding: Optional[str] = None) -> "Buffer":
        """Read ``path`` into a fresh Buffer.

        A missing file yields a single empty Line with ``is_new`` set; this is
        how untitled documents are created, not an error.
        """
        from edim.core.FileIO import read_document

        return read_document(path, encoding=encoding).buffer

    def save_to(self, path: str, encoding: str = "utf-8") -> None:
        """Write every Line followed by ``\\n``.

        Raises:
            FileWriteError: the destination could not be opened or written.
        """
        from edim.core.FileIO import write_document

        write_document(self, path, encoding=encoding)

    # --- Read access ---
    @property
    def line_count(self) -> int:
        return len(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[Line]:
        return iter(self._lines)

    def line(self, row: int) -> Line:
        self._check_row(row)
        return self._lines[row]

    def texts(self) -> list[str]:
        """Snapshot of the line texts in document order."""
        return [line.text for line in self._lines]

    def _check_row(self, row: int) -> None:
        if row < 0 or row >= len(self._lines):
            raise AddressingError(
                f"Row {row} outside 0..{len(self._lines) - 1}", row=row
            )

    # --- Character edits ---
    def insert_char(self, row: int, column: int, ch: str) -> None:
        self.line(row).insert_at(column, ch)

    def delete_char(self, row: int, column: int) -> bool:
        """Delete the character at ``(row, column)``; no-op at end of line."""
        return self.line(row).delete_at(column)

    # --- Structural edits ---
    def split_line(self, row: int, column: int) -> None:
        """Split the Line at ``row``; the suffix becomes Line ``row + 1``."""
        suffix = self.line(row).split_at(column)
        self._lines.insert(row + 1, suffix)
        logger.debug("split_line(%d, %d): %d lines", row, column, len(self._lines))

    def merge_with_previous(self, row: int) -> Optional[int]:
        """Append Line ``row`` onto Line ``row - 1`` and remove it.

        Returns:
            The column in the previous Line where the merged text starts, or
            ``None`` when ``row`` is 0 and there is nothing to merge.
        """
        self._check_row(row)
        if row == 0:
            logger.debug("merge_with_previous: nothing to merge at row 0")
            return None
        previous = self._lines[row - 1]
        join_column = previous.length
        previous.append_text(self._lines[row].text)
        del self._lines[row]
        logger.debug("merge_with_previous(%d): join at column %d", row, join_column)
        return join_column

    def insert_line_after(self, row: int, text: str = "") -> None:
        self._check_row(row)
        self._lines.insert(row + 1, Line(text))

    def append_line(self, text: str = "") -> None:
        self._lines.append(Line(text))

    def remove_line(self, row: int) -> bool:
        """Remove Line ``row``. The last remaining Line is never removed."""
        self._check_row(row)
        if len(self._lines) == 1:
            logger.debug("remove_line: refusing to remove the only line")
            return False
        del self._lines[row]
        return True
