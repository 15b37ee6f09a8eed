"""
Structured logging configuration for module-launcher.

Configures structlog for human-readable text logging (default) with optional JSON format.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict


def human_readable_renderer(
    logger: Any,
    method_name: str,
    event_dict: EventDict
) -> str:
    """
    Human-readable log format renderer.

    Format: [timestamp] [level] [logger] message key=value key2=value2
    Example: [2025-01-14 10:30:45] [INFO] [remote_loader] Unloading module instance=/cam
    """
    timestamp = event_dict.pop("timestamp", "")
    level = event_dict.pop("level", "info").upper()
    logger_name = event_dict.pop("logger", "")
    message = event_dict.pop("event", "")
    exception = event_dict.pop("exception", None)

    parts = []
    if timestamp:
        parts.append(f"[{timestamp}]")
    parts.append(f"[{level}]")
    if logger_name:
        parts.append(f"[{logger_name.rsplit('.', 1)[-1]}]")
    parts.append(str(message))

    for key, value in sorted(event_dict.items()):
        parts.append(f"{key}={value}")

    line = " ".join(parts)
    if exception:
        line = f"{line}\n{exception}"
    return line


def configure_logging(log_level: str = "INFO", log_format: str = "text") -> None:
    """
    Configure structlog.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "text" for human-readable lines, "json" for JSON lines
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    # Route standard logging (uvicorn, httpx) through the same stream
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else human_readable_renderer
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S" if log_format == "text" else "iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(instance: str = None, manager: str = None) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance with optional context.

    Args:
        instance: Module instance name
        manager: Manager namespace

    Returns:
        Configured logger instance
    """
    context: dict[str, Any] = {}
    if instance:
        context["instance"] = instance
    if manager:
        context["manager"] = manager

    return structlog.get_logger(**context)
