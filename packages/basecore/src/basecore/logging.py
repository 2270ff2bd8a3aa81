"""
Logging setup for apps and workers.

Modules log through logging.getLogger(__name__) and pass structured
context with extra={...}. setup_logging() configures the root logger once;
with LOG_JSON enabled every record becomes one JSON line that includes
those extra fields.
"""

import json
import logging
import sys
from datetime import datetime, timezone

from basecore.settings import get_settings

# Attributes every LogRecord has; anything else came from extra={...}
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


_configured = False


def setup_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """
    Configure the root logger.

    Safe to call more than once; only the first call installs a handler.
    """
    global _configured
    if _configured:
        return

    settings = get_settings()
    level = level or settings.LOG_LEVEL
    json_output = settings.LOG_JSON if json_output is None else json_output

    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )

    root = logging.getLogger()
    root.setLevel(level.upper())
    root.addHandler(handler)

    # SQLAlchemy is noisy at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    _configured = True
