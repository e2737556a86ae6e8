#!/usr/bin/env python3
# /edim/main.py
"""
edim Main Entry Point
=====================

This script launches the edim editor. It performs:
1) Environment Loading: reads ~/.config/edim/.env early (e.g. EDIM_KEYTRACE).
2) Path Setup: ensures the edim package is importable from a source checkout.
3) Configuration & Logging: loads config and initializes logging.
4) Argument Handling: ``main.py [path]`` or ``main.py -sy <rules> <path>``.
5) Curses Wrapper: safely initializes/tears down curses around the session.
"""

from __future__ import annotations

import curses
import locale
import logging
import os
import sys
from pathlib import Path
from typing import Any, NamedTuple, Optional

from dotenv import load_dotenv

# --- Step 1: Load Environment Variables from the User's Config Directory ---
try:
    load_dotenv(dotenv_path=Path.home() / ".config" / "edim" / ".env")
except Exception as e_env:
    print(f"Warning: could not load ~/.config/edim/.env: {e_env}", file=sys.stderr)

# --- Step 2: Set up the Python Path ---
project_root = os.path.join(os.path.dirname(os.path.abspath(__file__)), "src")
if os.path.isdir(project_root) and project_root not in sys.path:
    sys.path.insert(0, project_root)

# --- Step 3: Immediate Logging and Configuration Setup ---
try:
    from edim.utils.logging_config import setup_logging
    from edim.utils.utils import load_config

    config: dict[str, Any] = load_config()
    setup_logging(config)
    logger = logging.getLogger("edim")
except Exception as e:
    print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
    import traceback
    traceback.print_exc()
    sys.exit(1)

from edim.core.EditorSession import EditorSession  # noqa: E402
from edim.ui.DrawScreen import DrawScreen  # noqa: E402
from edim.ui.KeyBinder import KeyBinder  # noqa: E402


# --- Step 4: Argument Handling ---
class LaunchArgs(NamedTuple):
    path: Optional[str]
    rules_path: Optional[str]


def parse_args(argv: list[str]) -> LaunchArgs:
    """Interpret the command line.

    ``-sy <rules> <path>`` loads a highlight rule file; it needs both
    operands. In every other case the first argument is the document path,
    and without arguments an unnamed document is started.
    """
    if len(argv) > 3 and argv[1] == "-sy":
        return LaunchArgs(path=argv[3], rules_path=argv[2])
    if len(argv) > 1:
        return LaunchArgs(path=argv[1], rules_path=None)
    return LaunchArgs(path=None, rules_path=None)


def build_session(args: LaunchArgs, app_config: dict[str, Any]) -> EditorSession:
    session = EditorSession(app_config)
    if args.rules_path:
        session.load_rules(args.rules_path)
    if args.path:
        session.open_file(args.path)
    else:
        session.new_document()
    return session


# --- Step 5: Curses Application Runner ---
def main_app_runner(stdscr: curses.window, app_config: dict[str, Any], args: LaunchArgs) -> None:
    """Target for `curses.wrapper`: builds the session and runs it until quit.

    Raw mode keeps Ctrl+S and Ctrl+Q from being taken by terminal flow
    control.
    """
    curses.raw()
    stdscr.keypad(True)
    try:
        curses.curs_set(1)
    except curses.error:
        logger.debug("Terminal does not support cursor visibility changes.")

    session = build_session(args, app_config)
    screen = DrawScreen(stdscr, app_config)
    keys = KeyBinder(stdscr, app_config)
    try:
        session.run(screen, keys)
    finally:
        session.close()


def start() -> None:
    """Initialize the locale and run the editor via curses.wrapper."""
    logger.info("edim editor starting up...")

    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    args = parse_args(sys.argv)

    try:
        curses.wrapper(main_app_runner, config, args)
        logger.info("edim editor shut down gracefully.")
    except Exception:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    start()
