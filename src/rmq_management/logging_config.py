"""Loguru configuration for applications using the management client.

The library only logs; calling setup_logging is left to the application.
"""

import json
import sys
from datetime import datetime, timezone

from loguru import logger

from rmq_management.config import Settings, get_settings


def text_formatter(record: dict) -> str:
    """Human-readable formatter for development.

    Shows the facade operation when the record was emitted inside one.
    """
    operation = record["extra"].get("operation", "")
    operation_str = f"[{operation}] " if operation else ""

    return (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        f"<cyan>{operation_str}</cyan>"
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>\n"
    )


def json_sink(message) -> None:
    """Sink that writes one JSON object per log record to stdout."""
    record = message.record

    log_entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["name"],
        "module": record["module"],
        "function": record["function"],
        "line": record["line"],
    }

    for key, value in record["extra"].items():
        try:
            json.dumps(value)
            log_entry[key] = value
        except (TypeError, ValueError):
            log_entry[key] = str(value)

    if record["exception"] is not None:
        log_entry["exception"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else None,
            "value": str(record["exception"].value) if record["exception"].value else None,
            "traceback": record["exception"].traceback is not None,
        }

    sys.stdout.write(json.dumps(log_entry) + "\n")
    sys.stdout.flush()


def setup_logging(settings: Settings | None = None) -> None:
    """Configure Loguru sinks.

    - JSON lines on stdout when log_format is "json"
    - Colourised text on stdout when log_format is "text"
    - An additional rotating file sink when log_file is set
    """
    settings = settings or get_settings()

    logger.remove()

    if settings.log_format == "json":
        logger.add(
            json_sink,
            level=settings.log_level,
            backtrace=True,
            diagnose=False,
        )
    else:
        logger.add(
            sys.stdout,
            format=text_formatter,
            level=settings.log_level,
            colorize=True,
            backtrace=True,
            diagnose=True,
        )

    if settings.log_file:
        logger.add(
            settings.log_file,
            rotation=settings.log_rotation,
            retention=settings.log_retention,
            level=settings.log_level,
            format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"
            if settings.log_format == "text"
            else "{message}",
            serialize=settings.log_format == "json",
            backtrace=True,
            diagnose=False,
        )

    logger.info(
        "Logging configured",
        level=settings.log_level,
        format=settings.log_format,
        log_file=settings.log_file,
    )
