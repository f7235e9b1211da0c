"""
Logging for the chart analysis service

Console output is human readable; the optional log file holds one JSON
object per line so analysis runs can be filtered by upload, user or strategy.
"""

import functools
import json
import logging
import logging.handlers
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from sheetcharts.config.settings import settings

ANALYSIS_LOGGER = "sheetcharts.analysis"
ACTIVITY_LOGGER = "sheetcharts.activity"
TIMING_LOGGER = "sheetcharts.timing"

# Context attached through ``extra=`` that the JSON formatter carries over
CONTEXT_FIELDS = (
    "operation", "duration_ms", "strategy", "chart_type", "rows", "columns",
    "user_id", "upload_id", "chart_id", "action", "count", "export_format", "request_id",
)

_LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_RESET = "\033[0m"


class ConsoleFormatter(logging.Formatter):
    """Plain text formatter that tints non-INFO levels when colour is on."""

    def __init__(self, fmt: str, colour: bool = False):
        super().__init__(fmt)
        self.colour = colour

    def format(self, record):
        text = super().format(record)
        tint = _LEVEL_COLORS.get(record.levelname) if self.colour else None
        return f"{tint}{text}{_RESET}" if tint else text


class JsonLogFormatter(logging.Formatter):
    """One JSON document per record, with analysis context flattened in."""

    def format(self, record):
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                entry[field] = getattr(record, field)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _file_handler(path: str) -> logging.Handler:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=10 * 1024 * 1024, backupCount=5)
    handler.setFormatter(JsonLogFormatter())
    return handler


def setup_logging(config: Optional[dict] = None):
    """
    Install the service's handlers on the root logger

    ``config`` has the shape returned by ``Settings.get_logging_config``.
    Existing root handlers are replaced so repeated app creation in tests
    does not duplicate output.
    """
    config = config or settings.get_logging_config()
    level = getattr(logging, config["level"].upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(level)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(ConsoleFormatter(config["format"], colour=settings.DEBUG))
    root_logger.addHandler(console)

    if config["file_logging"]:
        root_logger.addHandler(_file_handler(config["file_path"]))

    pipeline_level = logging.DEBUG if config["detailed"] else level
    for name in ("sheetcharts.core", ANALYSIS_LOGGER, TIMING_LOGGER):
        logging.getLogger(name).setLevel(pipeline_level)
    if not settings.DEBUG:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"🚀 Logging ready at {config['level']}"
        + (f", writing JSON to {config['file_path']}" if config["file_logging"] else "")
    )


def log_stage_timing(operation: str, duration_ms: float, **context):
    """Log how long a pipeline stage took; slow runs are warnings."""
    logger = logging.getLogger(TIMING_LOGGER)
    extra = {"operation": operation, "duration_ms": round(duration_ms, 2), **context}

    if duration_ms >= settings.SLOW_ANALYSIS_MS:
        logger.warning(f"🐢 {operation} took {duration_ms:.0f}ms", extra=extra)
    else:
        logger.debug(f"⚡ {operation} took {duration_ms:.2f}ms", extra=extra)


def log_chart_analysis(strategy: str, chart_type: str, row_count: int, column_count: int):
    logging.getLogger(ANALYSIS_LOGGER).info(
        f"📈 {chart_type} via {strategy} ({row_count} rows x {column_count} columns)",
        extra={"strategy": strategy, "chart_type": chart_type, "rows": row_count, "columns": column_count},
    )


def log_user_activity(user_id: str, action: str, **context):
    """Record a chart-history action (generation, export) for a user."""
    logging.getLogger(ACTIVITY_LOGGER).info(
        f"👤 {user_id} {action}" + (f" {context}" if context else ""),
        extra={"user_id": user_id, "action": action, **context},
    )


def monitor_performance(operation: str):
    """Time a synchronous pipeline call and report it through log_stage_timing."""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logging.getLogger(TIMING_LOGGER).error(
                    f"❌ {operation} failed after {(time.perf_counter() - started) * 1000:.2f}ms: {e}",
                    extra={"operation": operation},
                )
                raise
            log_stage_timing(operation, (time.perf_counter() - started) * 1000)
            return result

        return wrapper

    return decorator
