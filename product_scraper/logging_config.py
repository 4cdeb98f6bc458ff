"""Logging setup: readable console output plus JSON log files."""

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from pythonjsonlogger import jsonlogger

from product_scraper.config import settings

CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
JSON_FORMAT = "%(timestamp)s %(level)s %(name)s %(message)s"


class ScraperJsonFormatter(jsonlogger.JsonFormatter):
    """JSON records stamped with the UTC event time and call site.

    Context bound through ``get_logger`` (``url``, ``strategy``) arrives as
    record extras and is written as top-level keys by the base formatter.
    """

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["source"] = f"{record.module}.{record.funcName}:{record.lineno}"


def _file_handler(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(base_dir: Optional[Union[str, Path]] = None) -> logging.Logger:
    """Install handlers on the root logger, replacing any existing ones.

    Console output is always on. With ``log_to_file`` enabled, every record
    also goes to ``<base_dir>/<log_dir>/app.log`` and errors additionally to
    ``error.log``, both as JSON lines.

    Args:
        base_dir: Directory holding the log folder (defaults to the cwd)

    Returns:
        The configured root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level.upper()))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    if not settings.log_to_file:
        return root_logger

    logs_dir = (Path(base_dir) if base_dir else Path.cwd()) / settings.log_dir
    logs_dir.mkdir(parents=True, exist_ok=True)

    json_formatter = ScraperJsonFormatter(JSON_FORMAT)
    root_logger.addHandler(_file_handler(logs_dir / "app.log", logging.DEBUG, json_formatter))
    root_logger.addHandler(_file_handler(logs_dir / "error.log", logging.ERROR, json_formatter))

    return root_logger


class ContextLogger(logging.LoggerAdapter):
    """Adapter that attaches scrape context (url, strategy, ...) to each record."""

    def process(self, msg, kwargs):
        # Call-site extras win over bound context
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs

    def bind(self, **context) -> "ContextLogger":
        """Return a new adapter with additional context fields."""
        return ContextLogger(self.logger, {**self.extra, **context})


def get_logger(name: str, **context) -> ContextLogger:
    """
    Get a logger that tags every record with the given context.

    Args:
        name: Logger name (usually __name__)
        **context: Context fields, e.g. url='https://...', strategy='static'

    Returns:
        ContextLogger carrying the context
    """
    return ContextLogger(logging.getLogger(name), context)
