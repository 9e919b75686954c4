# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
Configuration for GST Lookup

Settings are read from GST_LOOKUP_* environment variables and validated
when a client is constructed.

Environment variables:
- GST_LOOKUP_API_BASE_URL: lookup service root
- GST_LOOKUP_KEY_VALIDITY: RPAK validity window in seconds (1-99)
- GST_LOOKUP_KEY_CODEC: "utf8" (server) or "latin1" (browser)
- GST_LOOKUP_TIMEOUT: request timeout in seconds (unset = no timeout)
- GST_LOOKUP_MAX_RETRIES: adapter retries (default 0, single attempt)
- GST_LOOKUP_DEBUG: "1" to log request/response details
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from gst_lookup.exceptions import GSTLookupConfigError

DEFAULT_API_BASE_URL = "https://api.taxlookup.fastgst.in"
DEFAULT_KEY_VALIDITY_SECONDS = 60
EXT_SCRIPT_MARKER = "--extscr=true"
KNOWN_CODECS = ("utf8", "server", "latin1", "browser")

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class GSTLookupSettings:
    """Runtime settings for the lookup client."""

    api_base_url: str = DEFAULT_API_BASE_URL
    key_validity_seconds: int = DEFAULT_KEY_VALIDITY_SECONDS
    key_payload: str = "{}"
    ext_header_value: str = EXT_SCRIPT_MARKER
    timeout: float | None = None
    currency_symbol: str = "₹"
    key_codec: str = "utf8"
    debug_mode: bool = False
    pool_connections: int = 10
    pool_maxsize: int = 20
    max_retries: int = 0

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "GSTLookupSettings":
        source = os.environ if env is None else env

        timeout_raw = source.get("GST_LOOKUP_TIMEOUT", "").strip()
        return cls(
            api_base_url=source.get("GST_LOOKUP_API_BASE_URL", "").strip() or DEFAULT_API_BASE_URL,
            key_validity_seconds=_env_int(source, "GST_LOOKUP_KEY_VALIDITY", DEFAULT_KEY_VALIDITY_SECONDS),
            key_codec=source.get("GST_LOOKUP_KEY_CODEC", "").strip().lower() or "utf8",
            timeout=_parse_float("GST_LOOKUP_TIMEOUT", timeout_raw) if timeout_raw else None,
            max_retries=_env_int(source, "GST_LOOKUP_MAX_RETRIES", 0),
            debug_mode=source.get("GST_LOOKUP_DEBUG", "").strip().lower() in _TRUTHY,
        )


def _env_int(source: Mapping[str, str], name: str, default: int) -> int:
    raw = source.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise GSTLookupConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError as exc:
        raise GSTLookupConfigError(f"{name} must be a number, got {raw!r}") from exc


@dataclass
class ConfigIssue:
    """Configuration issue"""
    field: str
    message: str
    severity: str = "error"


@dataclass
class ConfigValidationResult:
    """Result of configuration validation"""
    is_valid: bool
    issues: list[ConfigIssue]

    def get_errors(self) -> list[ConfigIssue]:
        return [i for i in self.issues if i.severity == "error"]

    def get_warnings(self) -> list[ConfigIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    def raise_if_invalid(self):
        if not self.is_valid:
            messages = [f"{i.field}: {i.message}" for i in self.get_errors()]
            raise GSTLookupConfigError(
                "Invalid GST lookup settings: " + "; ".join(messages),
                details={"errors": messages}
            )


class ConfigValidator:
    """Validates GST lookup settings"""

    def validate(self, settings: GSTLookupSettings) -> ConfigValidationResult:
        issues: list[ConfigIssue] = []

        issues.extend(self._validate_api_config(settings))
        issues.extend(self._validate_key_config(settings))
        issues.extend(self._validate_transport(settings))

        is_valid = len([i for i in issues if i.severity == "error"]) == 0
        return ConfigValidationResult(is_valid=is_valid, issues=issues)

    def _validate_api_config(self, settings) -> list[ConfigIssue]:
        issues = []

        if not settings.api_base_url:
            issues.append(ConfigIssue(
                field="api_base_url",
                message="API base URL is required",
                severity="error"
            ))
        elif not settings.api_base_url.startswith("https://"):
            issues.append(ConfigIssue(
                field="api_base_url",
                message="API base URL should use HTTPS",
                severity="warning"
            ))

        return issues

    def _validate_key_config(self, settings) -> list[ConfigIssue]:
        issues = []

        validity = settings.key_validity_seconds
        if isinstance(validity, bool) or not isinstance(validity, int) or validity < 1:
            issues.append(ConfigIssue(
                field="key_validity_seconds",
                message="Key validity must be a positive integer",
                severity="error"
            ))
        elif validity > 99:
            issues.append(ConfigIssue(
                field="key_validity_seconds",
                message="Key validity above 99 seconds does not fit the 2-digit field and will be misread",
                severity="warning"
            ))

        if settings.key_codec not in KNOWN_CODECS:
            issues.append(ConfigIssue(
                field="key_codec",
                message=f"Unknown key codec {settings.key_codec!r}",
                severity="error"
            ))

        if not settings.key_payload:
            issues.append(ConfigIssue(
                field="key_payload",
                message="Key payload must not be empty",
                severity="error"
            ))

        return issues

    def _validate_transport(self, settings) -> list[ConfigIssue]:
        issues = []

        if settings.timeout is not None and settings.timeout <= 0:
            issues.append(ConfigIssue(
                field="timeout",
                message="Timeout must be positive when set",
                severity="error"
            ))

        if settings.max_retries < 0:
            issues.append(ConfigIssue(
                field="max_retries",
                message="Retries must not be negative",
                severity="error"
            ))

        return issues


def validate_config(settings: GSTLookupSettings) -> ConfigValidationResult:
    return ConfigValidator().validate(settings)


def get_config_status(settings: GSTLookupSettings | None = None) -> dict:
    result = validate_config(settings or GSTLookupSettings.from_env())
    return {
        "valid": result.is_valid,
        "errors": [{"field": i.field, "message": i.message} for i in result.get_errors()],
        "warnings": [{"field": i.field, "message": i.message} for i in result.get_warnings()]
    }
