"""JSON logging for the gmethod webhook.

One JSON object per line. A record may carry a `context` dict
(``extra={"context": {...}}``). Context keys that hold user-authored text are
masked, since that text is only ever stored encrypted.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

REDACTED_KEYS = frozenset({"input_text", "text", "content", "reply_token"})
MASK = "***"

NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "uvicorn.access")


def redact(context: dict[str, Any]) -> dict[str, Any]:
    return {key: MASK if key in REDACTED_KEYS and value else value for key, value in context.items()}


class JSONFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = getattr(record, "context", None)
        if context:
            log_data["context"] = redact(context)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Send every record to stdout as JSON."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"gmethod.{name}")


class TurnLogger(logging.LoggerAdapter):
    """Adds the user of the current conversation turn to every record's context."""

    def __init__(self, logger: logging.Logger, user_id: int, line_user_id: str):
        super().__init__(logger, {"user_id": user_id, "line_user_id": line_user_id})

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        context = kwargs.pop("context", None) or {}
        kwargs["extra"] = {"context": {**self.extra, **context}}
        return msg, kwargs
