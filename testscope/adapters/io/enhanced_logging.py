"""
Logging setup with Rich integration.

Diagnostics go to stderr through a ``RichHandler`` installed once on the root
logger, so they never mix with command lines printed on stdout. The level is
WARNING by default, DEBUG when ``TVDEBUG`` is set or ``--verbose`` is passed,
and ERROR with ``--quiet``. Tracing never changes what gets resolved.
"""

import logging
import os
import threading

from rich.console import Console
from rich.logging import RichHandler

from .rich_cli import TESTSCOPE_THEME

DEBUG_ENV_VAR = "TVDEBUG"


def debug_enabled_from_env(environ: dict[str, str] | None = None) -> bool:
    """True when the debug toggle is set to anything but an explicit off value."""
    environ = os.environ if environ is None else environ
    value = environ.get(DEBUG_ENV_VAR, "").strip().lower()
    return value not in {"", "0", "false", "no", "off"}


class LoggerManager:
    """Manager for configuring the root logger once per process."""

    _console: Console | None = None
    _handler: RichHandler | None = None
    _setup_complete: bool = False
    _setup_lock: threading.Lock = threading.Lock()

    @classmethod
    def setup_global_logging(
        cls, console: Console | None = None, level: int = logging.WARNING
    ) -> None:
        """Set up global logging configuration with thread safety."""
        with cls._setup_lock:
            root_logger = logging.getLogger()

            if cls._setup_complete:
                root_logger.setLevel(level)
                return

            cls._console = console or Console(theme=TESTSCOPE_THEME, stderr=True)

            # Remove any existing RichHandlers that aren't ours, keep other handlers
            for handler in list(root_logger.handlers):
                if isinstance(handler, RichHandler):
                    root_logger.removeHandler(handler)

            rich_handler = RichHandler(
                console=cls._console,
                show_time=False,
                show_path=False,
                markup=False,
                rich_tracebacks=True,
            )
            rich_handler.setFormatter(logging.Formatter(fmt="%(message)s"))

            root_logger.addHandler(rich_handler)
            root_logger.setLevel(level)
            cls._handler = rich_handler
            cls._setup_complete = True

    @classmethod
    def set_level(cls, verbose: bool = False, quiet: bool = False) -> int:
        """Configure the root level: quiet (ERROR) > verbose/TVDEBUG (DEBUG) > default WARNING."""
        if quiet:
            level = logging.ERROR
        elif verbose or debug_enabled_from_env():
            level = logging.DEBUG
        else:
            level = logging.WARNING

        logging.getLogger().setLevel(level)
        return level

    @classmethod
    def reset(cls) -> None:
        """Remove the installed handler so logging can be configured again."""
        with cls._setup_lock:
            if cls._handler is not None:
                logging.getLogger().removeHandler(cls._handler)
            cls._console = None
            cls._handler = None
            cls._setup_complete = False


def setup_enhanced_logging(
    console: Console | None = None, verbose: bool = False, quiet: bool = False
) -> logging.Logger:
    """Set up logging and return the main testscope logger."""
    LoggerManager.setup_global_logging(console)
    LoggerManager.set_level(verbose=verbose, quiet=quiet)
    logger = logging.getLogger("testscope.main")
    logger.propagate = True
    return logger
