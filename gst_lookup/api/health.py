# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
Health Check for GST Lookup

Liveness record and a connectivity probe against the lookup service.
"""

import time
from datetime import datetime, timezone
from typing import Any

from gst_lookup import __version__
from gst_lookup.exceptions import GSTLookupError
from gst_lookup.utils.config import get_config_status
from gst_lookup.utils.logging import correlation_scope, get_logger

logger = get_logger("gst_lookup.health")

DEFAULT_PROBE_QUERY = "milk"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def health() -> dict[str, Any]:
    """
    Basic health check.

    Returns:
        dict: Health status with timestamp
    """
    return {
        "status": "healthy",
        "app": "gst_lookup",
        "version": __version__,
        "timestamp": _timestamp()
    }


def check_api_connectivity(client=None, probe_query: str = DEFAULT_PROBE_QUERY) -> dict[str, Any]:
    """
    Test connectivity to the lookup service with one keyword search.

    Never raises; failures are logged and reported in the result.
    The check runs under its own correlation ID, returned with the result.
    """
    result: dict[str, Any] = {
        "status": "unknown",
        "response_time_ms": None,
        "api_endpoint": None,
        "config": None,
        "error": None,
        "correlation_id": None,
        "timestamp": _timestamp()
    }

    with correlation_scope() as correlation_id:
        result["correlation_id"] = correlation_id
        try:
            if client is None:
                from gst_lookup.api.client import GSTLookupClient
                client = GSTLookupClient()

            result["api_endpoint"] = client.base_url
            result["config"] = get_config_status(client.settings)

            start = time.monotonic()
            client.search_by_keywords(probe_query)
            result["response_time_ms"] = round((time.monotonic() - start) * 1000, 2)
            result["status"] = "healthy"
            logger.info("API connectivity check passed", response_time_ms=result["response_time_ms"])

        except GSTLookupError as e:
            result["status"] = "unhealthy"
            result["error"] = str(e)
            logger.error("API connectivity check failed", error=str(e), error_type=type(e).__name__)

    return result
