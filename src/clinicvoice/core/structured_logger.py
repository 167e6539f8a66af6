"""
Structured logging utilities for comprehensive application logging
"""

import json
import logging
import sys
from datetime import datetime
from typing import Any, Dict, Optional

from .config import LoggingSettings


class StructuredLogger:
    """
    Structured logger that outputs JSON logs for easy parsing and querying
    """

    def __init__(self, name: str, level: Optional[int] = None):
        self.logger = logging.getLogger(name)
        if level is not None:
            self.logger.setLevel(level)

    def log(self, level: str, message: str, **kwargs: Any) -> None:
        """Log with structured data"""
        log_method = getattr(self.logger, level, None)
        if log_method is None:
            raise ValueError(f"Unknown log level: {level}")
        exc_info = kwargs.pop("exc_info", None)
        log_method(message, exc_info=exc_info, extra={"extra_data": kwargs})

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info level"""
        self.log("info", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning level"""
        self.log("warning", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error level"""
        self.log("error", message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug level"""
        self.log("debug", message, **kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        """Log critical level"""
        self.log("critical", message, **kwargs)


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Add extra fields if present
        if hasattr(record, "extra_data"):
            log_obj.update(record.extra_data)

        return json.dumps(log_obj, default=str)


class KeyValueFormatter(logging.Formatter):
    """Plain-text formatter that appends structured fields as key=value pairs."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        extra = getattr(record, "extra_data", None)
        if extra:
            text += " " + " ".join(f"{k}={v}" for k, v in extra.items())
        return text


def configure_logging(settings: LoggingSettings) -> None:
    """Install the configured formatter on the root logger."""
    handler = logging.StreamHandler(sys.stdout)
    if settings.format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(KeyValueFormatter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(settings.level)


def get_logger(name: str) -> StructuredLogger:
    """Get or create a structured logger"""
    return StructuredLogger(name)
