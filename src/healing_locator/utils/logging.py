"""
Logging setup: rich output on stderr, optional plain or JSON log file.

Library modules only call logging.getLogger(__name__); handlers are attached
here, by the CLI or by the host test suite.
"""

import json
import logging
from typing import Optional, TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from healing_locator.config.settings import LoggingSettings

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def _file_handler(path: str, json_format: bool) -> logging.Handler:
    handler = logging.FileHandler(path)
    handler.setFormatter(JsonFormatter() if json_format else logging.Formatter(FILE_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> None:
    """
    Replace the root handlers with a RichHandler and, if asked, a file handler.

    Args:
        level: Level name; unknown names fall back to INFO
        log_file: Also write records to this file
        json_format: Write the file as JSON lines instead of plain text
    """
    numeric = getattr(logging, level.upper(), logging.INFO)

    handlers: list = [
        RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
    ]
    if log_file:
        handlers.append(_file_handler(log_file, json_format))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(numeric)
    for handler in handlers:
        handler.setLevel(numeric)
        root.addHandler(handler)


def setup_logging_from_settings(settings: "LoggingSettings") -> None:
    """Configure logging from a LoggingSettings section."""
    setup_logging(
        level=settings.level,
        log_file=settings.file,
        json_format=settings.json_format,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
