"""
Centralized logging configuration for the community hub data layer.

Every fetch, cache and aggregation message is tagged with the data source
that produced it ("github_json", "google_sheets", ...). The tag is prefixed
to the message text and also attached to the record as `source`, so the
JSON format can emit it as its own field.
"""

import json
import logging
import sys
from typing import Any, Optional


class SourceLogger:
    """
    Logger that tags every message with its data source.

    Example output:
        2024-06-01 12:00:00 [INFO] community_hub.services.remote_fetcher: [github_json] Loaded JSON: .../index.json
    """

    def __init__(self, name: str, source: Optional[str] = None):
        """
        Args:
            name: Logger name (usually __name__)
            source: Optional source tag (e.g., "github_json", "google_sheets")
        """
        self.logger = logging.getLogger(name)
        self.source = source

    @property
    def level(self) -> int:
        return self.logger.getEffectiveLevel()

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        if self.source:
            message = f"[{self.source}] {message}"
            extra = dict(kwargs.pop("extra", None) or {})
            extra.setdefault("source", self.source)
            kwargs["extra"] = extra
        self.logger.log(level, message, **kwargs)

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs):
        """Log at ERROR with the active exception's traceback."""
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, message, **kwargs)


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        source = getattr(record, "source", None)
        if source:
            payload["source"] = source
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str = "INFO", format: str = "simple") -> None:
    """
    Configure the root logger with a single stdout handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        format: "simple" for development, "json" for production
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
        )

    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))


def get_logger(name: str, source: Optional[str] = None) -> SourceLogger:
    """Get a source-tagged logger."""
    return SourceLogger(name, source)
