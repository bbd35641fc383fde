# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""``dictConfig`` for uvicorn and stdlib module loggers.

Module loggers and uvicorn's loggers are rendered in the same JSON line
shape as StdoutLogger, so one service emits one stream.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def __init__(self, service_name: str = "fieldops"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: Dict[str, Any] = {
            "timestamp": created.strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname,
            "logger": self.service_name,
            "source": record.name,
            "message": record.getMessage(),
        }
        if getattr(record, "extra", None):
            entry["extra"] = record.extra
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def create_uvicorn_log_config(service_name: str, log_level: str = "INFO") -> Dict[str, Any]:
    """Build uvicorn's ``log_config``.

    Access logs are emitted at DEBUG so health probes stay quiet at INFO. The
    stdlib logger named ``service_name`` gets no handler because StdoutLogger
    already writes those records itself.

    Example:
        >>> uvicorn.run(app, log_config=create_uvicorn_log_config("messaging", "INFO"))
    """
    level = log_level.upper()

    def console(logger_level: str) -> Dict[str, Any]:
        return {"handlers": ["console"], "level": logger_level, "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"json": {"()": JSONFormatter, "service_name": service_name}},
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "json", "stream": "ext://sys.stdout"},
        },
        "root": {"handlers": ["console"], "level": level},
        "loggers": {
            "uvicorn": console(level),
            "uvicorn.error": console(level),
            "uvicorn.access": console("DEBUG"),
            service_name: {"handlers": [], "propagate": False},
        },
    }
