"""Logging setup for Lullaby.

All loggers live under the ``lullaby`` namespace so one call configures the
whole package:

    from lullaby.core import get_logger
    logger = get_logger(__name__)

    logger.debug("Wave suppressed by regulation gate")
    logger.warning("Sentence hard-split at token limit")

Records show the component path below the namespace (``core.attention``,
``service.kokoro``) rather than the full module name.
"""
import logging
import sys
from datetime import datetime
from typing import Optional


ROOT_LOGGER = "lullaby"

# Chatty libraries that only matter when something breaks
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")

RESET = "\033[0m"
DIM = "\033[2m"
CYAN = "\033[36m"

# Level -> (tag, ANSI color)
LEVEL_STYLES = {
    logging.DEBUG: ("debug", DIM),
    logging.INFO: ("info", "\033[32m"),
    logging.WARNING: ("warn", "\033[33m"),
    logging.ERROR: ("error", "\033[31m"),
    logging.CRITICAL: ("fatal", "\033[1;31m"),
}


def component(logger_name: str) -> str:
    """Logger name relative to the package, e.g. "core.engine"."""
    prefix = ROOT_LOGGER + "."
    if logger_name.startswith(prefix):
        return logger_name[len(prefix):]
    return logger_name


class LullabyFormatter(logging.Formatter):
    """One line per record: time, level tag, component, message.

    With ``color`` set the tag and component are wrapped in ANSI codes for
    terminals; without it the output is plain and carries the full date, for
    log files and captured stdout.
    """

    def __init__(self, color: bool = False):
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        tag, ansi = LEVEL_STYLES.get(record.levelno, (record.levelname.lower(), ""))
        created = datetime.fromtimestamp(record.created)
        where = component(record.name)

        if self.color:
            line = (
                f"{DIM}{created:%H:%M:%S}{RESET} {ansi}{tag:<5}{RESET} "
                f"{CYAN}{where}{RESET} {record.getMessage()}"
            )
        else:
            line = f"{created:%Y-%m-%d %H:%M:%S} {tag:<5} {where} {record.getMessage()}"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Route the package's records to stdout (and optionally a file).

    Calling it again replaces the previous handlers.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR); unknown names mean INFO
        log_file: Optional path that also receives plain records

    Returns:
        The package root logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(numeric_level)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(LullabyFormatter(color=sys.stdout.isatty()))
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(LullabyFormatter())
        root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, placed under the lullaby namespace."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
