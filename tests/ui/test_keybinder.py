# tests/ui/test_keybinder.py
"""Unit tests for the `KeyBinder` class.
========================================

Covers key-string decoding, configuration overrides, translation of raw key
codes into editor events and ESC-sequence folding in `get_key_input`.

Only curses constants are used, so no terminal is required; `stdscr` is a
`MagicMock` whose `getch` is scripted per test.
"""

import curses
from unittest.mock import MagicMock, patch

import pytest

from edim.core.EditorSession import Event, EventKind
from edim.ui.KeyBinder import KeyBinder


@pytest.fixture
def binder(mock_stdscr: MagicMock) -> KeyBinder:
    return KeyBinder(mock_stdscr, {})


class TestDecodeKeystring:
    @pytest.mark.parametrize(
        "spec, expected",
        [
            ("ctrl+s", 19),
            ("Ctrl+Q", 17),
            ("ctrl+a", 1),
            ("tab", 9),
            ("esc", 27),
            ("space", ord(" ")),
            ("x", ord("x")),
            ("up", curses.KEY_UP),
            ("backspace", curses.KEY_BACKSPACE),
            ("f2", curses.KEY_F2),
            (343, 343),
        ],
    )
    def test_known_specs(self, binder: KeyBinder, spec: str | int, expected: int) -> None:
        assert binder._decode_keystring(spec) == expected

    def test_alt_chords_become_logical_keys(self, binder: KeyBinder) -> None:
        assert binder._decode_keystring("alt+x") == "alt-x"
        assert binder._decode_keystring("Alt-X") == "alt-x"

    @pytest.mark.parametrize("spec", ["", "   ", "bogus", "ctrl+f5", "shift+a"])
    def test_invalid_specs_raise(self, binder: KeyBinder, spec: str) -> None:
        with pytest.raises(ValueError):
            binder._decode_keystring(spec)

    def test_non_string_spec_raises(self, binder: KeyBinder) -> None:
        with pytest.raises(ValueError):
            binder._decode_keystring(1.5)  # type: ignore[arg-type]


class TestBindings:
    def test_default_bindings(self, binder: KeyBinder) -> None:
        assert binder.keybindings["save_file"] == [19]
        assert binder.keybindings["quit"] == [17]
        assert binder.action_map[curses.KEY_UP] is EventKind.UP
        assert binder.action_map[127] is EventKind.BACKSPACE
        assert binder.action_map[10] is EventKind.NEWLINE

    def test_pipe_separated_override(self, mock_stdscr: MagicMock) -> None:
        kb = KeyBinder(mock_stdscr, {"keybindings": {"save_file": "ctrl+w|f2"}})
        assert kb.keybindings["save_file"] == [23, curses.KEY_F2]
        assert 19 not in kb.action_map

    def test_list_override_skips_bad_items(self, mock_stdscr: MagicMock) -> None:
        with patch("edim.ui.KeyBinder.logger") as mock_logger:
            kb = KeyBinder(mock_stdscr, {"keybindings": {"quit": ["nonsense", "ctrl+x"]}})
        assert kb.keybindings["quit"] == [24]
        mock_logger.error.assert_called_once()

    def test_empty_override_unbinds_action(self, mock_stdscr: MagicMock) -> None:
        kb = KeyBinder(mock_stdscr, {"keybindings": {"handle_tab": ""}})
        assert "handle_tab" not in kb.keybindings
        assert kb.translate(9).kind is EventKind.NOOP

    def test_conflicting_binding_keeps_first(self, mock_stdscr: MagicMock) -> None:
        with patch("edim.ui.KeyBinder.logger") as mock_logger:
            kb = KeyBinder(mock_stdscr, {"keybindings": {"quit": "ctrl+s"}})
        assert kb.action_map[19] is EventKind.SAVE
        mock_logger.warning.assert_called()


class TestTranslate:
    def test_bound_keys(self, binder: KeyBinder) -> None:
        assert binder.translate(19) == Event(EventKind.SAVE)
        assert binder.translate(17) == Event(EventKind.QUIT)
        assert binder.translate(13) == Event(EventKind.NEWLINE)
        assert binder.translate(9) == Event(EventKind.TAB)
        assert binder.translate(curses.KEY_LEFT) == Event(EventKind.LEFT)

    @pytest.mark.parametrize("key, char", [(ord("a"), "a"), (ord(" "), " "), (126, "~"), ("z", "z")])
    def test_printable_keys_become_chars(self, binder: KeyBinder, key: int | str, char: str) -> None:
        assert binder.translate(key) == Event.of_char(char)

    @pytest.mark.parametrize(
        "key", [curses.ERR, 0, 27, 31, 128, 233, curses.KEY_RESIZE, curses.KEY_F5, "alt-x"]
    )
    def test_everything_else_is_noop(self, binder: KeyBinder, key: int | str) -> None:
        assert binder.translate(key).kind is EventKind.NOOP


class TestKeyInput:
    def test_plain_key_passes_through(self, binder: KeyBinder, mock_stdscr: MagicMock) -> None:
        mock_stdscr.getch.return_value = ord("q")
        assert binder.get_key_input() == ord("q")
        mock_stdscr.nodelay.assert_not_called()

    @pytest.mark.parametrize(
        "tail, expected",
        [
            ("[A", curses.KEY_UP),
            ("[D", curses.KEY_LEFT),
            ("OC", curses.KEY_RIGHT),
            ("OM", curses.KEY_ENTER),
        ],
    )
    def test_escape_sequences_fold_to_keys(
        self, binder: KeyBinder, mock_stdscr: MagicMock, tail: str, expected: int
    ) -> None:
        mock_stdscr.getch.side_effect = [27, *map(ord, tail), curses.ERR]
        assert binder.get_key_input() == expected
        mock_stdscr.nodelay.assert_any_call(True)
        mock_stdscr.nodelay.assert_called_with(False)

    def test_alt_chord(self, binder: KeyBinder, mock_stdscr: MagicMock) -> None:
        mock_stdscr.getch.side_effect = [27, ord("X"), curses.ERR]
        assert binder.get_key_input() == "alt-x"

    def test_lone_and_unknown_escape(self, binder: KeyBinder, mock_stdscr: MagicMock) -> None:
        mock_stdscr.getch.side_effect = [27, curses.ERR]
        assert binder.get_key_input() == 27
        mock_stdscr.getch.side_effect = [27, ord("["), ord("Z"), curses.ERR]
        assert binder.get_key_input() == 27

    def test_curses_error_returns_err(self, binder: KeyBinder, mock_stdscr: MagicMock) -> None:
        mock_stdscr.getch.side_effect = curses.error("no input")
        assert binder.get_key_input() == curses.ERR

    def test_read_event_decodes_and_traces(self, binder: KeyBinder, mock_stdscr: MagicMock) -> None:
        mock_stdscr.getch.side_effect = [ord("h"), 19, 27, ord("["), ord("B"), curses.ERR]
        with patch("edim.ui.KeyBinder.KEY_LOGGER") as key_logger:
            events = [binder.read_event() for _ in range(3)]
        assert events == [Event.of_char("h"), Event(EventKind.SAVE), Event(EventKind.DOWN)]
        assert key_logger.debug.call_count == 3
