"""JSON-lines logging for the API process.

Records carry a dotted ``event`` name plus whatever the caller passed via
``extra``. Credential-looking fields are masked before serialization.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from foresy.core.config import get_config

_RECORD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}
REDACTED = "[REDACTED]"
SENSITIVE_KEYS = frozenset({"password", "password_hash", "token", "access_token", "refresh_token", "authorization", "secret"})
QUIET_IN_PRODUCTION = ("sqlalchemy.engine", "uvicorn.access", "alembic.runtime.migration")


def redact(key: str, value: Any) -> Any:
    return REDACTED if key.lower() in SENSITIVE_KEYS else value


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, redact(key, value))
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def _handler(handler: logging.Handler, formatter: logging.Formatter) -> logging.Handler:
    handler.setFormatter(formatter)
    return handler


def configure_logging(force: bool = False) -> None:
    """Install the JSON handlers on the root logger.

    A second call is a no-op unless ``force`` is set, so uvicorn reloads and
    test runs do not stack duplicate handlers.
    """
    config = get_config()
    root = logging.getLogger()
    if root.handlers and not force:
        return
    for existing in list(root.handlers):
        root.removeHandler(existing)

    root.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))
    formatter = JsonFormatter()
    root.addHandler(_handler(logging.StreamHandler(sys.stdout), formatter))
    if config.LOG_FILE:
        root.addHandler(_handler(logging.FileHandler(config.LOG_FILE), formatter))

    if config.is_production:
        for name in QUIET_IN_PRODUCTION:
            logging.getLogger(name).setLevel(logging.WARNING)
