# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3
"""
GST Lookup Exception Hierarchy

Provides a consistent exception hierarchy for tax lookup operations.
All custom exceptions inherit from GSTLookupError for easy catching.
"""

from __future__ import annotations

from typing import Any


class GSTLookupError(Exception):
    """Base exception for all GST lookup errors.

    Example:
        try:
            client.get_tax_info("0401")
        except GSTLookupError as e:
            show_error(e.to_dict())
    """

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details
        }


class InvalidArgumentError(GSTLookupError):
    """Bad caller input, detected before any network call.

    Attributes:
        field: Argument that failed validation
        errors: List of validation messages
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[str] | None = None
    ):
        super().__init__(message, code="INVALID_ARGUMENT")
        self.field = field
        self.errors = errors or []


class GSTLookupAPIError(GSTLookupError):
    """Non-success response from the tax lookup service.

    Attributes:
        status_code: HTTP status code
        response_body: Raw response text
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None
    ):
        super().__init__(message, code="API_ERROR", details={"status_code": status_code})
        self.status_code = status_code
        self.response_body = response_body


class GSTLookupConnectionError(GSTLookupError):
    """Transport-level failure reaching the tax lookup service."""
    pass


class GSTLookupAggregateError(GSTLookupError):
    """One or more legs of a concurrent lookup failed.

    Attributes:
        errors: The underlying exceptions, in leg order
    """

    def __init__(self, message: str, errors: list[BaseException] | None = None):
        self.errors = list(errors or [])
        super().__init__(
            message,
            code="AGGREGATE_ERROR",
            details={"errors": [str(e) for e in self.errors]}
        )


class GSTLookupConfigError(GSTLookupError):
    """Raised when settings are missing or invalid."""
    pass


__all__ = [
    "GSTLookupError",
    "InvalidArgumentError",
    "GSTLookupAPIError",
    "GSTLookupConnectionError",
    "GSTLookupAggregateError",
    "GSTLookupConfigError",
]
