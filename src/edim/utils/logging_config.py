# edim/utils/logging_config.py
"""edim.utils.logging_config
===========================

Logging configuration for the edim editor. It defines the global loggers and
a single function, `setup_logging`, which attaches handlers and sets levels
from the ``[logging]`` section of the application configuration.

Features:
    - Rotating file logging for general application events (editor.log).
    - Optional console logging to stderr. Off by default, since curses owns
      the terminal while the editor runs.
    - Optional separate error log file (error.log) for ERROR and CRITICAL events.
    - Optional key event tracing (keytrace.log) enabled via the EDIM_KEYTRACE
      environment variable.
    - Creation of missing log directories, with fallback to the system temp
      directory on failure.
    - Safe reconfiguration: existing handlers are cleared when called again.
    - Never raises; problems are reported to stderr.

Usage:
    >>> from edim.utils import logging_config
    >>> logging_config.setup_logging({"logging": {"file_level": "INFO"}})

Globals:
    logger: Main application logger ("edim").
    KEY_LOGGER: Logger for raw key-press trace events ("edim.keyevents").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


# ======================== Global loggers ========================
logger = logging.getLogger("edim")
KEY_LOGGER = logging.getLogger("edim.keyevents")

KEYTRACE_ENV_VAR = "EDIM_KEYTRACE"


def _ensure_log_dir(log_filename: str, fallback_name: str) -> str:
    """Create the directory of ``log_filename``; fall back to the temp dir."""
    log_dir = os.path.dirname(log_filename)
    if log_dir and not os.path.exists(log_dir):
        try:
            os.makedirs(log_dir)
        except OSError as e_mkdir:
            print(f"Error creating log directory '{log_dir}': {e_mkdir}", file=sys.stderr)
            log_filename = os.path.join(tempfile.gettempdir(), fallback_name)
            print(f"Logging to temporary file: '{log_filename}'", file=sys.stderr)
    return log_filename


def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configure application-wide logging handlers and log levels.

    Up to four independent handlers are set up:

    1. File handler: rotating ``log_file`` (default editor.log, 2 MiB x 5)
       from ``file_level`` (default DEBUG) upward.
    2. Console handler: optional stderr output at ``console_level``
       (default WARNING), enabled by ``log_to_console``.
    3. Error-file handler: optional rotating error.log with ERROR and
       CRITICAL records only, enabled by ``separate_error_log``.
    4. Key-event handler: rotating keytrace.log attached to
       ``edim.keyevents`` when ``EDIM_KEYTRACE`` is ``1/true/yes``.

    Args:
        config (dict | None): Application configuration. Only the
            ``["logging"]`` sub-section is consulted.
    """
    if config is None:
        config = {}
    logging_config = config.get("logging", {})

    log_filename = _ensure_log_dir(str(logging_config.get("log_file", "editor.log")), "edim.log")
    log_file_level_str = str(logging_config.get("file_level", "DEBUG")).upper()
    log_file_level = getattr(logging, log_file_level_str, logging.DEBUG)

    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
    )
    file_handler = None
    try:
        file_handler = logging.handlers.RotatingFileHandler(
            log_filename, maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_file_level)
    except Exception as e_fh:
        print(
            f"Error setting up file logger for '{log_filename}': {e_fh}. File logging may be impaired.",
            file=sys.stderr,
        )

    # Console Handler
    console_handler = None
    if logging_config.get("log_to_console", False):
        console_level_str = str(logging_config.get("console_level", "WARNING")).upper()
        console_log_level = getattr(logging, console_level_str, logging.WARNING)
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(levelname)-8s - %(name)-12s - %(message)s"))
        console_handler.setLevel(console_log_level)

    # Optional Separate Error Log File
    error_file_handler = None
    if logging_config.get("separate_error_log", False):
        error_log_filename = "error.log"
        try:
            error_file_handler = logging.handlers.RotatingFileHandler(
                error_log_filename, maxBytes=1 * 1024 * 1024, backupCount=3, encoding="utf-8"
            )
            error_file_handler.setFormatter(file_formatter)
            error_file_handler.setLevel(logging.ERROR)
        except Exception as e_efh:
            print(
                f"Error setting up separate error log '{error_log_filename}': {e_efh}.",
                file=sys.stderr,
            )

    root_logger = logging.getLogger()
    root_logger.handlers = []  # avoid duplicates on reconfiguration

    for handler in (file_handler, console_handler, error_file_handler):
        if handler:
            root_logger.addHandler(handler)

    root_logger.setLevel(log_file_level)

    # Key Event Logger
    key_event_logger = logging.getLogger("edim.keyevents")
    key_event_logger.propagate = False
    key_event_logger.setLevel(logging.DEBUG)
    key_event_logger.handlers = []
    key_event_logger.disabled = False

    if os.environ.get(KEYTRACE_ENV_VAR, "").lower() in {"1", "true", "yes"}:
        try:
            key_trace_filename = "keytrace.log"
            key_trace_handler = logging.handlers.RotatingFileHandler(
                key_trace_filename, maxBytes=1 * 1024 * 1024, backupCount=3, encoding="utf-8"
            )
            key_trace_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
            key_event_logger.addHandler(key_trace_handler)
            logging.info("Key event tracing enabled, logging to '%s'.", key_trace_filename)
        except Exception as e_keytrace:
            logging.error("Failed to set up key trace logging: %s", e_keytrace, exc_info=True)
            key_event_logger.disabled = True
    else:
        key_event_logger.addHandler(logging.NullHandler())
        key_event_logger.disabled = True
        logging.debug("Key event tracing is disabled.")

    logging.info(
        "Logging setup complete. Root logger level: %s.",
        logging.getLevelName(root_logger.level),
    )
    if file_handler:
        logging.info(
            "File logging to '%s' at level: %s.",
            log_filename,
            logging.getLevelName(file_handler.level),
        )
    if console_handler:
        logging.info(
            "Console logging to stderr at level: %s.", logging.getLevelName(console_handler.level)
        )
    if error_file_handler:
        logging.info("Error logging to 'error.log' at level: ERROR.")
