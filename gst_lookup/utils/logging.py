# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
Structured Logging Utilities for GST Lookup

Provides correlation IDs and structured logging for tracing requests
across the client and its concurrent lookups.
"""

import json
import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

_correlation_id: ContextVar[str | None] = ContextVar("gst_lookup_correlation_id", default=None)


class CorrelationContext:
    """Manages correlation ID for request tracing"""

    HEADER_NAME = "X-Correlation-ID"

    @classmethod
    def get_id(cls) -> str:
        """Get or create correlation ID for the current context"""
        correlation_id = _correlation_id.get()
        if correlation_id is None:
            correlation_id = cls._generate_id()
            _correlation_id.set(correlation_id)
        return correlation_id

    @classmethod
    def set_id(cls, correlation_id: str):
        _correlation_id.set(correlation_id)

    @classmethod
    def _generate_id(cls) -> str:
        return uuid.uuid4().hex[:12]

    @classmethod
    def clear(cls):
        _correlation_id.set(None)


@contextmanager
def correlation_scope(correlation_id: str | None = None):
    """Run a block under a fixed correlation ID"""
    token = _correlation_id.set(correlation_id or CorrelationContext._generate_id())
    try:
        yield _correlation_id.get()
    finally:
        _correlation_id.reset(token)


class StructuredLogger:
    """
    Structured logger for GST lookup.

    Usage:
        logger = StructuredLogger("gst_lookup.api")
        logger.info("Lookup complete", hsn_code="0401")
    """

    def __init__(self, name: str = "gst_lookup"):
        self.name = name
        self._logger = logging.getLogger(name)

    def _format_message(self, level: str, message: str, **kwargs) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level.upper(),
            "app": "gst_lookup",
            "logger": self.name,
            "correlation_id": CorrelationContext.get_id(),
            "message": message,
        }

        if kwargs:
            entry["data"] = kwargs

        return entry

    def _log(self, level: str, message: str, **kwargs):
        if not self._logger.isEnabledFor(getattr(logging, level.upper())):
            return
        entry = self._format_message(level, message, **kwargs)
        log_line = json.dumps(entry, default=str, ensure_ascii=False)
        getattr(self._logger, level.lower())(log_line)

    def debug(self, message: str, **kwargs):
        self._log("debug", message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log("info", message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log("warning", message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log("error", message, **kwargs)

    def api_call(
        self,
        method: str,
        url: str,
        status_code: int | None = None,
        duration_ms: float | None = None,
        error: str | None = None
    ):
        """Log API call with standard fields"""
        data: dict[str, Any] = {
            "http_method": method,
            "url": url,
        }

        if status_code is not None:
            data["status_code"] = status_code
        if duration_ms is not None:
            data["duration_ms"] = round(duration_ms, 2)
        if error:
            data["error"] = error

        level = "info" if not error else "error"
        self._log(level, f"API {method} {url}", **data)


# Singleton logger instance
logger = StructuredLogger("gst_lookup")


def get_logger(name: str | None = None) -> StructuredLogger:
    """Get a logger instance"""
    if name is None:
        return logger
    return StructuredLogger(name)
