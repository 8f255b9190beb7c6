"""
Renovation Estimator - Logging

Estimate and ingestion log records carry a few context attributes (passed
through ``extra=``). The JSON formatter emits them as fields, the console
formatter appends them as ``key=value`` pairs.
"""
import json
import logging
import os
import sys
from datetime import datetime, timezone

SERVICE_NAME = "renovation-estimator"

# Extra attributes copied into log lines when a record carries them
CONTEXT_FIELDS = ("document", "room_count", "quality_level", "grand_total")

CONSOLE_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def record_context(record: logging.LogRecord) -> dict:
    return {name: getattr(record, name) for name in CONTEXT_FIELDS if hasattr(record, name)}


def estimate_context(project, result) -> dict:
    """``extra=`` fields describing a calculated estimate."""
    return {
        "room_count": len(project.rooms),
        "quality_level": project.quality_level.value,
        "grand_total": round(result.grand_total, 2),
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""
    def format(self, record):
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "line": record.lineno,
        }
        entry.update(record_context(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Plain text for local runs, with the estimate context appended."""
    def __init__(self):
        super().__init__(CONSOLE_FORMAT)

    def format(self, record):
        line = super().format(record)
        context = record_context(record)
        if context:
            line += " " + " ".join(f"{key}={value}" for key, value in context.items())
        return line


def setup_logging(level: str = "INFO", json_output: bool = True):
    """Install a single stdout handler on the root logger."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_output else ConsoleFormatter())
    root.handlers = [handler]

    for name in ("uvicorn.access", "httpcore", "httpx"):
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging_from_env():
    """Configure logging from LOG_LEVEL (default INFO) and LOG_JSON (default true)."""
    setup_logging(
        level=os.getenv("LOG_LEVEL", "INFO"),
        json_output=os.getenv("LOG_JSON", "true").strip().lower() in ("1", "true", "yes"),
    )
