# edim/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen renders an EditorSession onto a curses window.

It is responsible for:
- initialising one colour pair per highlight category and for the status bar,
- drawing the visible Lines as coloured runs produced by the Classifier,
- rendering the reversed status bar on the last screen row,
- placing the terminal cursor at the session's logical cursor.

Every frame is drawn in full: the screen is erased, the text rows and status
bar are painted, and the result is flushed with ``noutrefresh`` followed by
``curses.doupdate``. Curses errors (typically writes into the bottom-right
cell) are logged and drawing continues.
"""

import curses
import logging
from typing import TYPE_CHECKING, Any, Optional

from wcwidth import wcwidth

from edim.core.Classifier import Category
from edim.utils.utils import hex_to_xterm

if TYPE_CHECKING:
    from edim.core.EditorSession import EditorSession


logger = logging.getLogger("edim.ui")


## ================= class DrawScreen ==============================
class DrawScreen:
    """Curses renderer for an :class:`EditorSession`.

    Attributes:
        MIN_WINDOW_WIDTH (int): Narrowest window that is drawn normally.
        MIN_WINDOW_HEIGHT (int): One text row plus the status bar.
        stdscr (curses.window): The window drawn into.
        config (dict[str, Any]): Application configuration.
        colors (dict[str, int]): Curses attributes keyed by category name
            (``default``, ``keyword``, ``string``, ``number``, ``comment``)
            plus ``status``.
    """

    MIN_WINDOW_WIDTH = 10
    MIN_WINDOW_HEIGHT = 2

    # name -> (default hex for 256-colour terminals, 8-colour fallback, extra attr)
    COLOR_DEFINITIONS: dict[str, tuple[str, int, int]] = {
        "default": ("#FFFFFF", curses.COLOR_WHITE, curses.A_NORMAL),
        "keyword": ("#00FFFF", curses.COLOR_CYAN, curses.A_NORMAL),
        "string": ("#00FF00", curses.COLOR_GREEN, curses.A_NORMAL),
        "number": ("#FF00FF", curses.COLOR_MAGENTA, curses.A_NORMAL),
        "comment": ("#FFFF00", curses.COLOR_YELLOW, curses.A_NORMAL),
        "status": ("#FFFFFF", curses.COLOR_WHITE, curses.A_REVERSE),
    }

    def __init__(self, stdscr: "curses.window", config: Optional[dict[str, Any]] = None) -> None:
        self.stdscr = stdscr
        self.config = config or {}
        self.tab_size = max(1, int(self.config.get("editor", {}).get("tab_size", 4)))
        self.colors: dict[str, int] = {}
        self.init_colors()

    # --- Colours ---
    def init_colors(self) -> None:
        """Initialise colour pairs, degrading to plain attributes without colour."""
        self.colors = {}

        if not curses.has_colors() or curses.COLORS < 8:
            logger.warning(
                "Terminal has no or limited color support (< 8). Using monochrome attributes."
            )
            self.colors = {
                "default": curses.A_NORMAL,
                "keyword": curses.A_BOLD,
                "string": curses.A_NORMAL,
                "number": curses.A_NORMAL,
                "comment": curses.A_DIM,
                "status": curses.A_REVERSE,
            }
            return

        try:
            curses.start_color()
        except curses.error as e:
            logger.warning("start_color failed: %s", e)

        user_colors = self.config.get("colors", {})
        can_use_256_colors = curses.COLORS >= 256
        background = curses.COLOR_BLACK

        for pair_id, (name, (default_hex, default_8_color, attr)) in enumerate(
            self.COLOR_DEFINITIONS.items(), start=1
        ):
            if pair_id >= curses.COLOR_PAIRS:
                logger.warning("Ran out of color pairs. Cannot initialize '%s'.", name)
                self.colors[name] = attr
                continue

            if can_use_256_colors:
                fg = hex_to_xterm(str(user_colors.get(name, default_hex)))
            else:
                fg = default_8_color

            try:
                curses.init_pair(pair_id, fg, background)
                self.colors[name] = curses.color_pair(pair_id) | attr
            except curses.error as e:
                logger.error("Failed to initialize curses pair for '%s': %s", name, e)
                self.colors[name] = attr

    def attr_for(self, category: Category) -> int:
        key = "default" if category is Category.PLAIN else category.value
        return self.colors.get(key, curses.A_NORMAL)

    # --- Width helpers ---
    @staticmethod
    def get_char_width(ch: str) -> int:
        """Return width (1-2 cells) of a single code point; non-printables count as 1."""
        w = wcwidth(ch)
        return 1 if w < 0 else w

    def get_string_width(self, text: str) -> int:
        return sum(self.get_char_width(ch) for ch in text)

    def expand_for_display(self, text: str, start_col: int = 0) -> str:
        """Return ``text`` as it occupies the screen from cell ``start_col``.

        Tabs become spaces up to the next multiple of ``tab_size`` and other
        control characters become caret notation (``\\x01`` -> ``^A``), the
        way curses itself would draw them.
        """
        out: list[str] = []
        col = start_col
        for ch in text:
            if ch == "\t":
                piece = " " * (self.tab_size - col % self.tab_size)
            elif ord(ch) < 32 or ord(ch) == 127:
                piece = "^" + chr(ord(ch) ^ 0x40)
            else:
                piece = ch
            out.append(piece)
            col += self.get_string_width(piece)
        return "".join(out)

    def truncate_string(self, s: str, max_width: int) -> str:
        """Return ``s`` clipped to visual width ``max_width``.

        Wide characters are never split; a glyph that would overflow is
        dropped together with everything after it.
        """
        result: list[str] = []
        consumed = 0
        for ch in s:
            w = self.get_char_width(ch)
            if consumed + w > max_width:
                break
            result.append(ch)
            consumed += w
        return "".join(result)

    # --- Frame ---
    def draw(self, session: "EditorSession") -> None:
        """Draw one complete frame for ``session``."""
        try:
            height, width = self.stdscr.getmaxyx()
            if height < self.MIN_WINDOW_HEIGHT or width < self.MIN_WINDOW_WIDTH:
                self._show_small_window_error(height, width)
                return

            session.set_visible_rows(height - 1)

            self.stdscr.erase()
            self._draw_text(session, width)
            self._draw_status_bar(session, height, width)
            self._position_cursor(session, width)
            self._update_display()
        except curses.error as e:
            logger.error("Curses error in DrawScreen.draw(): %s", e, exc_info=True)

    def _draw_text(self, session: "EditorSession", width: int) -> None:
        viewport = session.viewport
        last_row = min(viewport.offset_y + viewport.visible_rows, session.buffer.line_count)
        for screen_row, row in enumerate(range(viewport.offset_y, last_row)):
            text = session.buffer.line(row).text
            self._draw_line(screen_row, session.classifier.segments(text), width)

    def _draw_line(
        self, screen_row: int, segments: list[tuple[str, Category]], width: int
    ) -> None:
        """Paint the runs of one Line, clipping at the right edge."""
        x = 0
        for piece, category in segments:
            if x >= width:
                break
            visible = self.truncate_string(self.expand_for_display(piece, x), width - x)
            if not visible:
                break
            try:
                self.stdscr.addstr(screen_row, x, visible, self.attr_for(category))
            except curses.error as e:
                logger.debug("addstr failed at (%d,%d): %s", screen_row, x, e)
            x += self.get_string_width(visible)

    def _draw_status_bar(self, session: "EditorSession", height: int, width: int) -> None:
        """Reversed last row: status message on the left, position on the right.

        Layout: ``<message> ... [ name ] L: <row>, C: <column>`` where the
        name is ``newfile`` for an unnamed document.
        """
        y = height - 1
        name = session.filename or "newfile"
        info = f"[ {name} ] L: {session.cursor.row + 1}, C: {session.cursor.column + 1}"
        info = self.truncate_string(info, width)
        info_w = self.get_string_width(info)

        message = self.truncate_string(session.status_message, max(0, width - info_w))
        padding = " " * max(0, width - info_w - self.get_string_width(message))
        line = message + padding + info

        try:
            # Writing the bottom-right cell raises even though the text is drawn.
            self.stdscr.addstr(y, 0, line, self.colors.get("status", curses.A_REVERSE))
        except curses.error:
            pass

    def _position_cursor(self, session: "EditorSession", width: int) -> None:
        row = session.cursor.row - session.viewport.offset_y
        text = session.buffer.line(session.cursor.row).text
        prefix = self.expand_for_display(text[: session.cursor.column])
        x = min(self.get_string_width(prefix), width - 1)
        try:
            self.stdscr.move(row, x)
        except curses.error as e:
            logger.warning("Curses error positioning cursor at (%d, %d): %s", row, x, e)

    def _show_small_window_error(self, height: int, width: int) -> None:
        msg = self.truncate_string(f"Window too small ({width}x{height})", max(0, width - 1))
        try:
            self.stdscr.erase()
            if height > 0 and msg:
                self.stdscr.addstr(0, 0, msg)
            self._update_display()
        except curses.error:
            pass

    def _update_display(self) -> None:
        """Flush the frame with curses double buffering."""
        try:
            self.stdscr.noutrefresh()
            curses.doupdate()
        except curses.error as e:
            logger.error("Curses doupdate error: %s", e)
