"""
Structured logging utilities.

- JSON formatter with consistent fields
- Correlation ID via contextvars (bound per search by SearchSession)
- Helper to configure root logging for containerized environments
"""

from __future__ import annotations

import json
import logging
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional

# Public context var for correlation ID
request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class JsonFormatter(logging.Formatter):
    """
    Minimal JSON log formatter.

    Produces a single line JSON object with common fields and includes
    the correlation ID when available (from context var).
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime()),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        rid = request_id_ctx.get()
        if rid:
            payload["request_id"] = rid

        # Extras
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        # Attach module/file/line for debug levels
        if record.levelno <= logging.DEBUG:
            payload["module"] = record.module
            payload["filename"] = record.filename
            payload["lineno"] = record.lineno

        return json.dumps(payload, ensure_ascii=False)


def configure_json_logging(level: str | int = "INFO") -> None:
    """
    Configure root logger with JsonFormatter to stdout.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)  # type: ignore[arg-type]

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)

    # Quiet noisy libraries by default
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@contextmanager
def correlation_id(rid: Optional[str] = None) -> Iterator[str]:
    """
    Bind a correlation id for the duration of the block. Reuses the id already
    bound by an outer caller unless one is given explicitly.
    """
    rid = rid or request_id_ctx.get() or uuid.uuid4().hex[:16]
    token = request_id_ctx.set(rid)
    try:
        yield rid
    finally:
        request_id_ctx.reset(token)
