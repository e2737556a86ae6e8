# edim/core/Cursor.py
"""Cursor and Viewport addressing.

The Cursor is a logical ``(row, column)`` pair holding a row index into the
Buffer. The Viewport is the first visible row plus the number of text rows
the screen can show (the status bar takes the last one).
"""

import logging

from edim.core.Buffer import Buffer

logger = logging.getLogger("edim.cursor")


class Viewport:
    """Vertical scroll window over the Buffer."""

    def __init__(self, visible_rows: int = 1, offset_y: int = 0) -> None:
        self.visible_rows = max(1, visible_rows)
        self.offset_y = max(0, offset_y)

    def follow(self, row: int) -> bool:
        """Scroll by the minimal amount that makes ``row`` visible.

        Returns:
            bool: True when ``offset_y`` changed.
        """
        old = self.offset_y
        if row < self.offset_y:
            self.offset_y = row
        elif row >= self.offset_y + self.visible_rows:
            self.offset_y = row - self.visible_rows + 1
        if self.offset_y != old:
            logger.debug("Viewport scrolled %d -> %d (row %d)", old, self.offset_y, row)
        return self.offset_y != old

    def resize(self, visible_rows: int, row: int) -> None:
        """Apply a new text-area height and keep ``row`` on screen."""
        self.visible_rows = max(1, visible_rows)
        self.follow(row)

    def __repr__(self) -> str:
        return f"Viewport(visible_rows={self.visible_rows}, offset_y={self.offset_y})"


class Cursor:
    """Logical caret position.

    Movement never wraps between lines, and vertical moves clamp the column
    to the destination line instead of remembering a preferred column.
    """

    def __init__(self, row: int = 0, column: int = 0) -> None:
        self.row = row
        self.column = column

    @property
    def position(self) -> tuple[int, int]:
        return self.row, self.column

    def move_up(self, buffer: Buffer) -> bool:
        if self.row == 0:
            return False
        self.row -= 1
        self.column = min(self.column, buffer.line(self.row).length)
        return True

    def move_down(self, buffer: Buffer) -> bool:
        if self.row >= buffer.line_count - 1:
            return False
        self.row += 1
        self.column = min(self.column, buffer.line(self.row).length)
        return True

    def move_left(self, buffer: Buffer) -> bool:
        if self.column == 0:
            return False
        self.column -= 1
        return True

    def move_right(self, buffer: Buffer) -> bool:
        if self.column >= buffer.line(self.row).length:
            return False
        self.column += 1
        return True

    def move_to(self, row: int, column: int, buffer: Buffer) -> None:
        self.row = row
        self.column = column
        self.clamp(buffer)

    def clamp(self, buffer: Buffer) -> bool:
        """Pull the cursor back inside the Buffer.

        Returns:
            bool: True when the position had to be corrected.
        """
        row = min(max(0, self.row), buffer.line_count - 1)
        column = min(max(0, self.column), buffer.line(row).length)
        changed = (row, column) != (self.row, self.column)
        if changed:
            logger.debug("Cursor clamped (%d, %d) -> (%d, %d)", self.row, self.column, row, column)
        self.row, self.column = row, column
        return changed

    def __repr__(self) -> str:
        return f"Cursor(row={self.row}, column={self.column})"
