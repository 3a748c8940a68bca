"""
Structured logging configuration using structlog wrapping stdlib.

Console output by default, JSON lines when MENTOR_LOG_FORMAT=json so the
analysis runs can be shipped next to the extension's own logs.

Text samples are opted in for scoring only. Any event field that could carry
them (`samples`, `sample`, `text`, `consent_text`) is replaced by a size
marker before rendering, for structlog events and for stdlib records alike.

Usage:
    from mentor.logging_config import setup_logging
    setup_logging()

Environment:
    MENTOR_LOG_LEVEL   DEBUG, INFO (default), WARNING, ...
    MENTOR_LOG_FORMAT  "json" for JSON lines, anything else for console
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog


SENSITIVE_KEYS = frozenset({"samples", "sample", "text", "consent_text"})


def redact_text_samples(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor: keep the size of sample fields, drop their content."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, str):
            event_dict[key] = f"[redacted: {len(value)} chars]"
        elif isinstance(value, (list, tuple)):
            event_dict[key] = f"[redacted: {len(value)} items]"
    return event_dict


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_text_samples,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(level: str | None = None, json_output: bool | None = None) -> None:
    if level is None:
        level = os.environ.get("MENTOR_LOG_LEVEL", "INFO")

    if json_output is None:
        json_output = os.environ.get("MENTOR_LOG_FORMAT", "").lower() == "json"

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # foreign_pre_chain: config_models logs through plain stdlib logging
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    # Logs go to stderr; stdout is reserved for the JSON results of the CLI
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


__all__ = ["get_logger", "redact_text_samples", "setup_logging"]
