from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

# LogRecord's own attributes; anything else on the record came in via `extra`
_RESERVED = frozenset((
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
    "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
    "created", "msecs", "relativeCreated", "thread", "threadName", "processName",
    "process", "message", "taskName",
))

LOG_FILE_NAME = "scheduler.jsonl"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        # We always log with `extra={...}`; only our extras go in.
        for k, v in record.__dict__.items():
            if k in _RESERVED:
                continue
            payload[k] = v

        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def setup_logging(
    level: Optional[str] = None,
    log_dir: Optional[str] = None,
    to_file: Optional[bool] = None,
) -> None:
    """
    Configure the root logger with JSON-lines output.

    Arguments win over the LOG_LEVEL / LOG_DIR / LOG_TO_FILE environment variables.
    """
    level = (level or os.getenv("LOG_LEVEL", "WARNING")).upper()
    if to_file is None:
        to_file = _env_flag("LOG_TO_FILE", True)

    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = JsonFormatter()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(fmt)
    root.addHandler(console)

    if not to_file:
        return

    directory = Path(log_dir or os.getenv("LOG_DIR", "./logs"))
    directory.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        directory / LOG_FILE_NAME,
        maxBytes=10_000_000,  # 10MB
        backupCount=10,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)
