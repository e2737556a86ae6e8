# edim/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
The KeyBinder turns raw curses key codes into editor :class:`Event` objects.

Bindings map an action name (``save_file``, ``quit``, ``handle_enter``, ...)
to one or more key specifications. Defaults are built in; the
``[keybindings]`` section of the configuration can override any of them with
a single string (``"ctrl+s"``), a ``|``-separated string (``"ctrl+s|f2"``) or
a list mixing strings and integer key codes.

Printable ASCII keys that are not bound to an action become CHAR events;
everything else, including terminal resize, becomes NOOP.

When the environment variable ``EDIM_KEYTRACE`` is set, every key and the
event it produced is written to the ``edim.keyevents`` logger.
"""

import curses
import logging
import re
from typing import Any, Optional

from wcwidth import wcswidth

from edim.core.EditorSession import Event, EventKind

logger = logging.getLogger("edim.ui")
KEY_LOGGER = logging.getLogger("edim.keyevents")


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Reads keys from a curses window and decodes them into events.

    Attributes:
        stdscr: The curses window keys are read from.
        config: Application configuration (only ``keybindings`` is used).
        keybindings (dict): Action name -> list of key codes or logical keys.
        action_map (dict): Key code or logical key -> EventKind.
    """

    ACTION_EVENTS: dict[str, EventKind] = {
        "save_file": EventKind.SAVE,
        "quit": EventKind.QUIT,
        "handle_enter": EventKind.NEWLINE,
        "handle_tab": EventKind.TAB,
        "handle_backspace": EventKind.BACKSPACE,
        "handle_up": EventKind.UP,
        "handle_down": EventKind.DOWN,
        "handle_left": EventKind.LEFT,
        "handle_right": EventKind.RIGHT,
    }

    # Keys do NOT include the leading ESC; get_key_input() reads after it.
    ESCAPE_SEQUENCE_MAP: dict[str, str] = {
        "[A": "up", "[B": "down", "[C": "right", "[D": "left",
        "OA": "up", "OB": "down", "OC": "right", "OD": "left",
        "OM": "enter",
    }

    def __init__(self, stdscr: Any, config: Optional[dict[str, Any]] = None) -> None:
        logger.debug("KeyBinder initialized with window: %s", stdscr)
        self.stdscr = stdscr
        self.config = config or {}
        self.keybindings = self._load_keybindings()
        self.action_map = self._setup_action_map()

    def _load_keybindings(self) -> dict[str, list[int | str]]:
        """Merge the built-in bindings with the ``[keybindings]`` config section.

        Returns:
            dict[str, list[int | str]]: action name -> decoded key codes (or
            ``alt-...`` logical keys). Actions whose bindings all fail to
            decode are left unbound.
        """
        default_keybindings: dict[str, list[int | str]] = {
            "save_file": ["ctrl+s", 19],
            "quit": ["ctrl+q", 17],
            "handle_enter": ["enter", 10, 13],
            "handle_tab": ["tab", 9],
            "handle_backspace": ["backspace", curses.KEY_BACKSPACE, 8, 127],
            "handle_up": ["up"],
            "handle_down": ["down"],
            "handle_left": ["left"],
            "handle_right": ["right"],
        }

        user_keybindings_config: dict[str, object] = self.config.get("keybindings", {})
        parsed_keybindings: dict[str, list[int | str]] = {}

        for action, default_value_spec in default_keybindings.items():
            key_value_spec: object = user_keybindings_config.get(action, default_value_spec)

            if not key_value_spec:
                logger.debug("Keybinding for action %r is disabled or empty.", action)
                continue

            specs_to_process: list[int | str]
            if isinstance(key_value_spec, list):
                specs_to_process = key_value_spec  # type: ignore[assignment]
            elif isinstance(key_value_spec, str) and "|" in key_value_spec:
                specs_to_process = [s.strip() for s in key_value_spec.split("|")]
            else:
                specs_to_process = [key_value_spec]  # type: ignore[list-item]

            key_codes_for_action: list[int | str] = []
            for key_spec_item in specs_to_process:
                try:
                    key_code = self._decode_keystring(key_spec_item)
                except ValueError as e:
                    logger.error(
                        "Error parsing keybinding item %r for action %r: %s. "
                        "This specific binding for the action will be ignored.",
                        key_spec_item, action, e,
                    )
                    continue
                if key_code not in key_codes_for_action:
                    key_codes_for_action.append(key_code)

            if key_codes_for_action:
                parsed_keybindings[action] = key_codes_for_action
            else:
                logger.warning(
                    "No valid key codes found for action %r after parsing. It will not be bound.",
                    action,
                )

        logger.debug("Loaded keybindings (action -> key codes): %s", parsed_keybindings)
        return parsed_keybindings

    def _decode_keystring(self, key_input: str | int) -> int | str:
        """Decode a key specification into a curses key code.

        Args:
            key_input: An integer code, a named key (``"up"``, ``"tab"``,
                ``"backspace"``), a single character, ``"ctrl+<letter>"`` or an
                Alt chord (``"alt+x"`` / ``"alt-x"``).

        Returns:
            int | str: The key code, or the logical ``"alt-<key>"`` string.

        Raises:
            ValueError: The key string is empty or uses an unknown key or
                modifier.
        """
        if isinstance(key_input, int):
            return key_input
        if not isinstance(key_input, str):
            raise ValueError(f"Invalid key_input type: {type(key_input)}. Expected str or int.")

        s = key_input.strip().lower()
        if not s:
            raise ValueError("Key string cannot be empty.")

        parts = s.split("+")
        if "alt" in parts:
            others = sorted(p for p in parts[:-1] if p != "alt")
            s = "alt-" + "".join(f"{m}+" for m in others) + parts[-1]
        if s.startswith("alt-"):
            return s

        named_keys_map: dict[str, int] = {
            "left": curses.KEY_LEFT,
            "right": curses.KEY_RIGHT,
            "up": curses.KEY_UP,
            "down": curses.KEY_DOWN,
            "backspace": curses.KEY_BACKSPACE,
            "tab": 9,
            "enter": curses.KEY_ENTER,
            "return": curses.KEY_ENTER,
            "space": ord(" "),
            "esc": 27,
            "escape": 27,
        }
        named_keys_map.update(
            {f"f{i}": getattr(curses, f"KEY_F{i}", 264 + i) for i in range(1, 13)}
        )

        if s in named_keys_map:
            return named_keys_map[s]

        base_key_str = parts[-1].strip()
        modifiers = {p.strip() for p in parts[:-1]}

        if base_key_str in named_keys_map:
            base_code = named_keys_map[base_key_str]
        elif len(base_key_str) == 1:
            base_code = ord(base_key_str)
        else:
            raise ValueError(f"Unknown base key '{base_key_str}' in '{key_input}'")

        if "ctrl" in modifiers:
            modifiers.remove("ctrl")
            if len(base_key_str) == 1 and "a" <= base_key_str <= "z":
                base_code = ord(base_key_str) - ord("a") + 1
            else:
                raise ValueError(f"Unsupported Ctrl combination in '{key_input}'")

        if modifiers:
            raise ValueError(f"Unknown or unhandled modifiers {sorted(modifiers)} in '{key_input}'")

        return base_code

    def _setup_action_map(self) -> dict[int | str, EventKind]:
        action_map: dict[int | str, EventKind] = {}
        for action, key_codes in self.keybindings.items():
            kind = self.ACTION_EVENTS[action]
            for code in key_codes:
                if code in action_map and action_map[code] is not kind:
                    logger.warning(
                        "Key %r is bound to both %s and %s; keeping %s.",
                        code, action_map[code].name, kind.name, action_map[code].name,
                    )
                    continue
                action_map[code] = kind
        return action_map

    def translate(self, key: int | str) -> Event:
        """Decode one key from :meth:`get_key_input` into an Event."""
        kind = self.action_map.get(key)
        if kind is not None:
            return Event(kind)

        char: Optional[str] = None
        if isinstance(key, str) and len(key) == 1:
            char = key
        elif isinstance(key, int) and 32 <= key < 127:
            char = chr(key)

        if char is not None and char.isprintable() and wcswidth(char) > 0:
            return Event.of_char(char)

        if key == curses.KEY_RESIZE:
            logger.debug("Terminal resized.")
        return Event(EventKind.NOOP)

    def get_key_input(self) -> int | str:
        """Read one key, folding ESC sequences into key codes.

        Returns:
            int | str: a curses key code, ``"alt-<char>"`` for Alt chords,
            27 for a lone or unknown ESC sequence, ``curses.ERR`` on error.
        """
        try:
            ch = self.stdscr.getch()
            if ch != 27:
                return ch

            seq = ""
            self.stdscr.nodelay(True)
            try:
                while True:
                    nx = self.stdscr.getch()
                    if nx == curses.ERR:
                        break
                    if 0 <= nx <= 255:
                        seq += chr(nx)
            finally:
                self.stdscr.nodelay(False)

            if not seq:
                return 27
            if len(seq) == 1 and seq.isprintable():
                return f"alt-{seq.lower()}"

            mapped = self.ESCAPE_SEQUENCE_MAP.get(seq)
            if not mapped:
                cleaned = "".join(re.findall(r"[\[O0-9;~A-Za-z]", seq))
                mapped = self.ESCAPE_SEQUENCE_MAP.get(cleaned)
            if mapped:
                return self._decode_keystring(mapped)

            logger.warning("get_key_input: unknown escape sequence: ESC + %r", seq)
            return 27
        except curses.error:
            return curses.ERR

    def read_event(self) -> Event:
        """Block for the next key and return its Event."""
        key = self.get_key_input()
        event = self.translate(key)
        KEY_LOGGER.debug("key=%r -> %s %r", key, event.kind.name, event.char)
        return event
