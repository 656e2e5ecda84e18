"""
Logging setup for CLI and embedding applications.

Library modules only create `logging.getLogger(__name__)`; handlers are
installed here, once, by the entry point.
"""

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ingestkit.config.settings import Settings, get_settings


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def build_logging_config(settings: Settings) -> Dict[str, Any]:
    formatter = "json" if settings.log_format == "json" else "default"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
            "json": {
                "()": "ingestkit.core.logging.JsonFormatter",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
            }
        },
        "loggers": {
            "": {
                "handlers": ["console"],
                "level": settings.log_level.upper(),
            },
            # chatty client libraries
            "httpx": {"level": "WARNING"},
            "urllib3": {"level": "WARNING"},
        },
    }


def setup_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    logging.config.dictConfig(build_logging_config(settings))
