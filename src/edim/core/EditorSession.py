# edim/core/EditorSession.py
"""edim.core.EditorSession
==========================

The EditorSession owns all editing state of one run of the editor: the
Buffer, the Cursor and Viewport, the Classifier, the document name and the
status line. It turns decoded key events into Buffer and Cursor mutations.

The screen and key source are collaborators passed to :meth:`run`. Anything
with ``draw(session)`` and ``read_event()`` methods will do; the curses
implementations live in :mod:`edim.ui`.

Each cycle of :meth:`run`:

    1. ``screen.draw(session)``
    2. ``session.tick_status()``
    3. ``keys.read_event()`` (blocking)
    4. ``session.handle_event(event)``

until a QUIT event arrives.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Protocol

from edim.core.Buffer import Buffer
from edim.core.Classifier import Classifier, RuleSet
from edim.core.Cursor import Cursor, Viewport
from edim.core.errors import AddressingError, ConfigOpenError, FileWriteError
from edim.core.FileIO import load_rules, read_document, save_rules, write_document

logger = logging.getLogger("edim")

DEFAULT_TAB_SIZE = 4
DEFAULT_STATUS_TIMEOUT = 50

HINT_MESSAGE = "Type Ctrl+S to save, Ctrl+Q to quit."


class EventKind(Enum):
    CHAR = "char"
    NEWLINE = "newline"
    TAB = "tab"
    BACKSPACE = "backspace"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    SAVE = "save"
    QUIT = "quit"
    NOOP = "noop"


@dataclass(frozen=True)
class Event:
    """One decoded key press. ``char`` is only set for CHAR events."""

    kind: EventKind
    char: Optional[str] = None

    @classmethod
    def of_char(cls, char: str) -> "Event":
        return cls(EventKind.CHAR, char)


class Action(Enum):
    REDRAW = "redraw"
    IDLE = "idle"
    QUIT = "quit"


class Screen(Protocol):
    def draw(self, session: "EditorSession") -> None: ...


class KeySource(Protocol):
    def read_event(self) -> Event: ...


class EditorSession:
    """State owner and event dispatcher for a single document.

    Attributes:
        buffer (Buffer): The document being edited.
        cursor (Cursor): Logical caret position in ``buffer``.
        viewport (Viewport): First visible row and text-area height.
        classifier (Classifier): Highlighting scanner; disabled until rules
            are loaded.
        filename (str | None): Save target, ``None`` for an unnamed document.
        encoding (str): Encoding used when the document is saved.
        config_path (str | None): Rule file to persist on :meth:`close`.
        status_message (str): Current status line text.
        status_timer (int): Remaining draw cycles before the status clears.
    """

    def __init__(self, config: Optional[dict[str, Any]] = None) -> None:
        self.config = config or {}
        editor_config = self.config.get("editor", {})
        self.tab_size: int = max(1, int(editor_config.get("tab_size", DEFAULT_TAB_SIZE)))
        self.status_timeout: int = max(
            1, int(editor_config.get("status_timeout", DEFAULT_STATUS_TIMEOUT))
        )

        self.buffer = Buffer()
        self.cursor = Cursor()
        self.viewport = Viewport()
        self.classifier = Classifier()
        self.filename: Optional[str] = None
        self.encoding: str = "utf-8"
        self.config_path: Optional[str] = None
        self.status_message: str = ""
        self.status_timer: int = 0

        self._handlers: dict[EventKind, Callable[[Event], bool]] = {
            EventKind.CHAR: self.handle_char,
            EventKind.NEWLINE: self.handle_enter,
            EventKind.TAB: self.handle_tab,
            EventKind.BACKSPACE: self.handle_backspace,
            EventKind.UP: self.handle_up,
            EventKind.DOWN: self.handle_down,
            EventKind.LEFT: self.handle_left,
            EventKind.RIGHT: self.handle_right,
            EventKind.SAVE: self.handle_save,
        }

    # --- Status line ---
    def set_status(self, message: str) -> None:
        self.status_message = message
        self.status_timer = self.status_timeout
        logger.debug("Status message set to: '%s'", message)

    def tick_status(self) -> bool:
        """Count one redraw cycle down; clear the message when it expires.

        Returns:
            bool: True when the message was cleared on this tick.
        """
        if self.status_timer <= 0:
            return False
        self.status_timer -= 1
        if self.status_timer == 0 and self.status_message:
            self.status_message = ""
            return True
        return False

    # --- Documents ---
    def _reset_position(self) -> None:
        self.cursor = Cursor()
        self.viewport.offset_y = 0

    def new_document(self) -> None:
        """Start an unnamed, empty document."""
        self.buffer = Buffer()
        self.filename = None
        self.encoding = "utf-8"
        self._reset_position()
        self.set_status(HINT_MESSAGE)

    def open_file(self, path: str) -> bool:
        """Load ``path``; a missing file starts a new document under that name.

        Returns:
            bool: True when the document was read from disk.
        """
        self.filename = path
        self._reset_position()
        try:
            document = read_document(path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Could not open '%s': %s", path, e)
            self.buffer = Buffer()
            self.encoding = "utf-8"
            self.set_status(f"Error: Could not open file: {path}")
            return False

        self.buffer = document.buffer
        self.encoding = document.encoding
        if document.is_new:
            self.set_status(f"New file: {path}")
            return False
        self.set_status(f"Opened file: {path}")
        logger.info("Opened '%s' (%s, %d lines).", path, self.encoding, self.buffer.line_count)
        return True

    def save_file(self) -> bool:
        """Write the Buffer to ``filename``.

        Returns:
            bool: True when the file was written.
        """
        if not self.filename:
            self.set_status("No filename specified.")
            return False
        try:
            write_document(self.buffer, self.filename, self.encoding)
        except FileWriteError as e:
            logger.error("Save failed: %s", e)
            self.set_status("Error: Could not save file!")
            return False
        self.set_status("File saved successfully!")
        return True

    # --- Highlight rules ---
    def load_rules(self, path: str) -> bool:
        """Load a rule file and remember it for persistence on close.

        A rule file that cannot be opened leaves highlighting as it was.
        """
        self.config_path = path
        try:
            rules = load_rules(path)
        except ConfigOpenError as e:
            logger.warning("%s", e)
            self.set_status(f"Error: Could not open config file '{path}'.")
            return False
        self.classifier.set_rules(rules)
        self.set_status(f"Config file '{path}' loaded successfully.")
        return True

    def persist_rules(self) -> bool:
        if not self.config_path:
            return False
        rules = self.classifier.rules or RuleSet()
        try:
            save_rules(rules, self.config_path)
        except FileWriteError as e:
            logger.error("Could not persist highlight rules: %s", e)
            return False
        return True

    def close(self) -> None:
        """Final cleanup: persist the rule file when one was given."""
        if self.config_path:
            self.persist_rules()
        logger.info("Session closed.")

    # --- Geometry ---
    def set_visible_rows(self, rows: int) -> None:
        self.viewport.resize(rows, self.cursor.row)

    # --- Event handlers ---
    def handle_char(self, event: Event) -> bool:
        if not event.char or len(event.char) != 1 or event.char == "\n":
            logger.debug("Ignoring CHAR event with payload %r", event.char)
            return False
        self.buffer.insert_char(self.cursor.row, self.cursor.column, event.char)
        self.cursor.column += 1
        return True

    def handle_enter(self, event: Event) -> bool:
        self.buffer.split_line(self.cursor.row, self.cursor.column)
        self.cursor.row += 1
        self.cursor.column = 0
        return True

    def handle_tab(self, event: Event) -> bool:
        spaces = self.tab_size - (self.cursor.column % self.tab_size)
        for _ in range(spaces):
            self.buffer.insert_char(self.cursor.row, self.cursor.column, " ")
            self.cursor.column += 1
        return True

    def handle_backspace(self, event: Event) -> bool:
        if self.cursor.column > 0:
            self.cursor.column -= 1
            return self.buffer.delete_char(self.cursor.row, self.cursor.column)
        if self.cursor.row > 0:
            join_column = self.buffer.merge_with_previous(self.cursor.row)
            if join_column is None:
                return False
            self.cursor.row -= 1
            self.cursor.column = join_column
            return True
        return False

    def handle_up(self, event: Event) -> bool:
        return self.cursor.move_up(self.buffer)

    def handle_down(self, event: Event) -> bool:
        return self.cursor.move_down(self.buffer)

    def handle_left(self, event: Event) -> bool:
        return self.cursor.move_left(self.buffer)

    def handle_right(self, event: Event) -> bool:
        return self.cursor.move_right(self.buffer)

    def handle_save(self, event: Event) -> bool:
        self.save_file()
        return True

    def handle_event(self, event: Event) -> Action:
        """Apply one event to the session state.

        Returns:
            Action: ``QUIT`` for a quit event, ``REDRAW`` when state changed,
            ``IDLE`` otherwise.
        """
        if event.kind is EventKind.QUIT:
            logger.info("Quit requested.")
            return Action.QUIT

        handler = self._handlers.get(event.kind)
        if handler is None:
            return Action.IDLE

        try:
            changed = handler(event)
        except AddressingError:
            logger.error(
                "Addressing error while handling %s at %r", event.kind.name, self.cursor, exc_info=True
            )
            changed = True

        self.cursor.clamp(self.buffer)
        self.viewport.follow(self.cursor.row)
        return Action.REDRAW if changed else Action.IDLE

    # --- Main loop ---
    def run(self, screen: Screen, keys: KeySource) -> None:
        logger.info("Editor main loop started.")
        while True:
            try:
                screen.draw(self)
                self.tick_status()
                event = keys.read_event()
                if self.handle_event(event) is Action.QUIT:
                    break
            except KeyboardInterrupt:
                logger.info("Main loop interrupted by KeyboardInterrupt.")
                break
        logger.info("Editor main loop finished.")
