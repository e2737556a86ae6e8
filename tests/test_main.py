# tests/test_main.py
"""Tests for the `main.py` entry point: argument handling and session setup.

`main` loads configuration and sets up logging at import time, so it is
imported with HOME and the working directory pointed at a temporary folder.
"""

import importlib
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Generator
from unittest.mock import MagicMock, patch

import pytest


@pytest.fixture
def main_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[ModuleType, None, None]:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level

    sys.modules.pop("main", None)
    module = importlib.import_module("main")
    yield module

    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)
    sys.modules.pop("main", None)


def test_import_creates_user_config(main_module: ModuleType, tmp_path: Path) -> None:
    assert (tmp_path / ".config" / "edim" / "config.toml").is_file()
    assert main_module.config["editor"]["tab_size"] == 4


@pytest.mark.parametrize(
    "argv, expected",
    [
        (["edim"], (None, None)),
        (["edim", "foo.txt"], ("foo.txt", None)),
        (["edim", "-sy", "c.cfg", "foo.c"], ("foo.c", "c.cfg")),
        (["edim", "-sy", "c.cfg"], ("-sy", None)),
        (["edim", "foo.txt", "extra"], ("foo.txt", None)),
    ],
)
def test_parse_args(main_module: ModuleType, argv: list[str], expected: tuple) -> None:
    assert tuple(main_module.parse_args(argv)) == expected


def test_build_session_without_path(main_module: ModuleType, mock_config: dict[str, Any]) -> None:
    session = main_module.build_session(main_module.LaunchArgs(None, None), mock_config)
    assert session.filename is None
    assert session.status_message == "Type Ctrl+S to save, Ctrl+Q to quit."


def test_build_session_with_rules_and_new_file(
    main_module: ModuleType, mock_config: dict[str, Any], rules_file: Path, tmp_path: Path
) -> None:
    path = str(tmp_path / "foo.c")
    session = main_module.build_session(
        main_module.LaunchArgs(path, str(rules_file)), mock_config
    )
    assert session.classifier.enabled
    assert session.config_path == str(rules_file)
    assert session.status_message == f"New file: {path}"


def test_main_app_runner_closes_session(main_module: ModuleType, mock_config: dict[str, Any]) -> None:
    stdscr = MagicMock()
    session = MagicMock()
    with (
        patch.object(main_module, "curses") as curses_mock,
        patch.object(main_module, "build_session", return_value=session),
        patch.object(main_module, "DrawScreen") as screen_cls,
        patch.object(main_module, "KeyBinder") as keys_cls,
    ):
        session.run.side_effect = RuntimeError("boom")
        with pytest.raises(RuntimeError):
            main_module.main_app_runner(stdscr, mock_config, main_module.LaunchArgs(None, None))

    curses_mock.raw.assert_called_once()
    stdscr.keypad.assert_called_once_with(True)
    session.run.assert_called_once_with(screen_cls.return_value, keys_cls.return_value)
    session.close.assert_called_once()
