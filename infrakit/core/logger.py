"""Unified logging for infrakit with console and file output.

Module loggers from get_logger() carry no level of their own; they inherit
from the package logger "infrakit", which is INFO by default and DEBUG once
setup_file_logging(verbose=True) has run. The console handler stays at INFO.
"""
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

console = Console()

LOG_DIR = Path("/var/log/infrakit")
LOG_FILE = LOG_DIR / "infrakit.log"
PACKAGE_LOGGER = "infrakit"

_file_handler = None

logging.getLogger(PACKAGE_LOGGER).setLevel(logging.INFO)


def setup_file_logging(log_file: str = None, verbose: bool = False) -> Path:
    """Send every infrakit log record to a file as well as the console.

    Args:
        log_file: Path to log file (defaults to /var/log/infrakit/infrakit.log)
        verbose: Also write DEBUG records (the console stays at INFO)

    Returns:
        The file actually written to. Falls back to /tmp/infrakit.log when
        the directory of the requested file cannot be created.
    """
    global _file_handler

    if _file_handler is not None:
        return Path(_file_handler.baseFilename)

    target_log_file = Path(log_file) if log_file else LOG_FILE

    try:
        target_log_file.parent.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        target_log_file = Path("/tmp/infrakit.log")

    level = logging.DEBUG if verbose else logging.INFO
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    _file_handler = logging.FileHandler(target_log_file)
    _file_handler.setLevel(level)
    _file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    package_logger.addHandler(_file_handler)
    package_logger.setLevel(level)

    package_logger.info(f"infrakit logging initialized: {target_log_file}")
    return target_log_file


def close_file_logging() -> None:
    """Detach and close the file handler added by setup_file_logging()."""
    global _file_handler

    if _file_handler is None:
        return

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.removeHandler(_file_handler)
    _file_handler.close()
    _file_handler = None
    package_logger.setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger with a Rich console handler attached.

    File logging must be enabled separately via setup_file_logging().
    """
    logger = logging.getLogger(name)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_path=False, level=logging.INFO)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    return logger
