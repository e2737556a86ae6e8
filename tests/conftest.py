# tests/conftest.py
"""Pytest configuration with shared fixtures for the edim editor tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from edim.core.Buffer import Buffer
from edim.core.Classifier import RuleSet
from edim.core.EditorSession import EditorSession


# --- Base fixtures for curses and configuration ---
@pytest.fixture
def mock_stdscr() -> MagicMock:
    """Create a mock of the `curses` stdscr for UI components.

    Returns:
        MagicMock: A mocked `stdscr` with terminal size set to (24, 80).
    """
    stdscr = MagicMock()
    stdscr.getmaxyx.return_value = (24, 80)
    return stdscr


@pytest.fixture
def mock_config() -> dict[str, dict[str, Any]]:
    """Provide a baseline configuration for session and UI tests."""
    return {
        "editor": {"tab_size": 4, "status_timeout": 50},
        "colors": {},
        "keybindings": {},
        "logging": {"log_to_console": False},
    }


# --- Core fixtures ---
@pytest.fixture
def sample_text() -> list[str]:
    """A short document used by buffer and session tests."""
    return [
        "int main() {",
        '    printf("hi");',
        "    return 0; // done",
        "}",
    ]


@pytest.fixture
def sample_buffer(sample_text: list[str]) -> Buffer:
    return Buffer.from_lines(sample_text)


@pytest.fixture
def c_rules() -> RuleSet:
    """Keywords and comment markers for a C-like language."""
    return RuleSet(keywords=["int", "if", "return", "while"], comment_markers=["//", "#"])


@pytest.fixture
def session(mock_config: dict[str, dict[str, Any]]) -> EditorSession:
    """A session on an empty, unnamed document with 23 visible rows."""
    editor = EditorSession(mock_config)
    editor.new_document()
    editor.set_visible_rows(23)
    return editor


@pytest.fixture
def session_with_text(session: EditorSession, sample_text: list[str]) -> EditorSession:
    session.buffer = Buffer.from_lines(sample_text)
    return session


@pytest.fixture
def rules_file(tmp_path: Path) -> Path:
    """A rule file with both sections on disk."""
    path = tmp_path / "rules.cfg"
    path.write_text("[keywords]\nif\nwhile\n[comments]\n//\n", encoding="utf-8")
    return path
