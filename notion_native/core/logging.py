"""
Logging setup for notion-native.

Console and file output share one formatter: a level marker, the short
logger name and any structured key=value data. ``StructuredLogger`` carries
bound context (for example the page being migrated) into every record.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

# Loggers that flood DEBUG output with request traces
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "asyncio")

RESET = "\033[0m"


class NotionNativeFormatter(logging.Formatter):
    """
    Formatter rendering ``[time] <emoji>  name: message (key=value, ...)``.
    """

    # level name -> (emoji, ANSI color)
    LEVEL_STYLES = {
        "DEBUG": ("🔍", "\033[90m"),
        "INFO": ("ℹ️", "\033[36m"),
        "WARNING": ("⚠️", "\033[33m"),
        "ERROR": ("❌", "\033[31m"),
        "CRITICAL": ("🚨", "\033[35m"),
    }

    def __init__(self, use_color: bool | None = None, include_date: bool = False):
        super().__init__()
        self.use_color = use_color
        self.time_format = "%Y-%m-%d %H:%M:%S" if include_date else "%H:%M:%S"

    def _colorize(self) -> bool:
        if self.use_color is not None:
            return self.use_color
        return sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        emoji, color = self.LEVEL_STYLES.get(record.levelname, ("📝", ""))
        timestamp = datetime.fromtimestamp(record.created).strftime(self.time_format)
        source = record.name.rsplit(".", 1)[-1]

        line = f"[{timestamp}] {emoji}  {source}: {record.getMessage()}"

        data = getattr(record, "extra_data", None)
        if data:
            line += " (" + ", ".join(f"{key}={value}" for key, value in data.items()) + ")"

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        if color and self._colorize():
            line = f"{color}{line}{RESET}"
        return line


class StructuredLogger:
    """
    Wraps a stdlib logger; keyword arguments and bound context become
    ``extra_data`` on the emitted record.

    Example:
        log = get_logger(__name__).bind(page_id="abc")
        log.info("Saved blocks", blocks=12)
    """

    def __init__(
        self,
        name: str,
        level: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        self.logger = logging.getLogger(name)
        if level:
            self.logger.setLevel(level.upper())
        self.context = dict(context or {})

    def bind(self, **context) -> "StructuredLogger":
        """Return a logger for the same name with extra bound context."""
        return StructuredLogger(self.logger.name, context={**self.context, **context})

    def debug(self, message: str, **kwargs) -> None:
        self._emit(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._emit(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._emit(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._emit(logging.ERROR, message, kwargs)

    def exception(self, message: str, **kwargs) -> None:
        """Log at ERROR with the active exception's traceback."""
        self._emit(logging.ERROR, message, kwargs, exc_info=True)

    def _emit(
        self, level: int, message: str, data: dict[str, Any], exc_info: bool = False
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        self.logger.log(
            level,
            message,
            exc_info=exc_info,
            extra={"extra_data": {**self.context, **data}},
        )


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> None:
    """
    Configure the root logger for the CLI.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file that also receives every record, uncolored
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    for handler in list(root.handlers):
        root.removeHandler(handler)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(NotionNativeFormatter())
    root.addHandler(console)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(NotionNativeFormatter(use_color=False, include_date=True))
        root.addHandler(file_handler)

    quiet_level = logging.DEBUG if root.level <= logging.DEBUG else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(name)


__all__ = ["NotionNativeFormatter", "StructuredLogger", "setup_logging", "get_logger"]
