from __future__ import annotations

import contextvars
import logging
import os
import sys

TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

REQUEST_ID: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "tablecheck_request_id", default=None
)


def trace(self: logging.Logger, msg: str, *args, **kwargs) -> None:  # type: ignore[override]
    if self.isEnabledFor(TRACE_LEVEL):
        self._log(TRACE_LEVEL, msg, args, **kwargs)


logging.Logger.trace = trace  # type: ignore[attr-defined]


class RequestIdLogFilter(logging.Filter):
    """Stamp ``record.request_id`` so handlers can include it in their format."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = REQUEST_ID.get() or "-"
        return True


def configure_logging(default_level: str = "INFO") -> logging.Logger:
    # stderr keeps stdout free for the CLI report and --json output.
    level_name = os.getenv("TABLECHECK_LOG_LEVEL", default_level).upper()
    if level_name == "TRACE":
        level = TRACE_LEVEL
    else:
        level = getattr(logging, level_name, logging.INFO)
    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(RequestIdLogFilter())
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s [%(request_id)s] | %(message)s")
    )
    logging.basicConfig(level=level, handlers=[handler])
    return logging.getLogger("tablecheck")


__all__ = ["REQUEST_ID", "RequestIdLogFilter", "TRACE_LEVEL", "configure_logging"]
