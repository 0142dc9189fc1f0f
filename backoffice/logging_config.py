"""
Logging for the expense core.

Console output is human-readable; ``backoffice.log`` and ``errors.log`` get
one JSON object per line, with the domain fields passed through ``extra=``.
"""

import logging
import logging.handlers
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from backoffice.config import settings

# Attributes copied from ``extra={...}`` into the JSON payload
EXTRA_FIELDS = (
    "organization_id",
    "user_id",
    "expense_id",
    "category_id",
    "supplier_id",
    "event_type",
    "duration",
)

NOISY_LOGGERS = ("asyncio", "sqlalchemy", "sqlalchemy.engine", "aiosqlite", "asyncpg")

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Handlers added by the last setup_logging() call
_installed: List[logging.Handler] = []


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        log_data.update(
            {name: getattr(record, name) for name in EXTRA_FIELDS if hasattr(record, name)}
        )
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Decimal amounts and datetimes arrive through extra=
        return json.dumps(log_data, ensure_ascii=False, default=str)


def _json_file_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(log_dir: Optional[Path] = None) -> None:
    """
    Attach console, JSON file and JSON error-file handlers to the root logger.

    Calling it again replaces the handlers from the previous call and leaves
    handlers installed by anything else alone.
    """
    log_dir = Path(log_dir or settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    while _installed:
        handler = _installed.pop()
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    )
    _installed.extend([
        console_handler,
        _json_file_handler(log_dir / "backoffice.log", logging.DEBUG),
        _json_file_handler(log_dir / "errors.log", logging.ERROR),
    ])
    for handler in _installed:
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"Logging to {log_dir.absolute()} at {settings.log_level.upper()}"
    )
