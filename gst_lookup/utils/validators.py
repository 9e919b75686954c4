# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
Validation Utilities for GST Lookup

Validates caller input before any request is sent to the lookup service.
"""

import re
from dataclasses import dataclass
from typing import Any

from gst_lookup.exceptions import InvalidArgumentError

# JS-style \d is ASCII only, so spell the digit class out
HSN_CODE_PATTERN = r"[0-9]{4,8}"


@dataclass
class ValidationError:
    """Single validation error"""
    field: str
    message: str
    code: str = "invalid"
    value: Any = None


@dataclass
class ValidationResult:
    """Result of validation"""
    is_valid: bool
    errors: list[ValidationError]

    def raise_if_invalid(self):
        if not self.is_valid:
            first = self.errors[0]
            raise InvalidArgumentError(
                first.message,
                field=first.field,
                errors=[f"{e.field}: {e.message}" for e in self.errors]
            )


class Validator:
    """Chainable field validator"""

    def __init__(self):
        self._errors: list[ValidationError] = []
        self._current_field: str | None = None
        self._current_value: Any = None
        self._skip_remaining = False

    def field(self, name: str, value: Any) -> "Validator":
        self._current_field = name
        self._current_value = value
        self._skip_remaining = False
        return self

    def _add_error(self, message: str, code: str = "invalid"):
        self._errors.append(ValidationError(
            field=self._current_field or "unknown",
            message=message,
            code=code,
            value=self._current_value
        ))

    def required(self, message: str | None = None) -> "Validator":
        if self._skip_remaining:
            return self
        if self._current_value is None or self._current_value == "":
            self._add_error(message or "This field is required", "required")
            self._skip_remaining = True
        return self

    def is_string(self, message: str | None = None) -> "Validator":
        if self._skip_remaining:
            return self
        if not isinstance(self._current_value, str):
            self._add_error(message or "Must be a string", "type")
            self._skip_remaining = True
        return self

    def not_blank(self, message: str | None = None) -> "Validator":
        if self._skip_remaining:
            return self
        if not str(self._current_value).strip():
            self._add_error(message or "Must not be blank", "blank")
            self._skip_remaining = True
        return self

    def regex(self, pattern: str, message: str | None = None) -> "Validator":
        if self._skip_remaining:
            return self
        if not re.fullmatch(pattern, str(self._current_value).strip()):
            self._add_error(message or "Invalid format", "format")
        return self

    def positive_int(self, message: str | None = None) -> "Validator":
        if self._skip_remaining:
            return self
        value = self._current_value
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            self._add_error(message or "Must be a positive integer", "positive")
        return self

    def validate(self) -> ValidationResult:
        return ValidationResult(
            is_valid=len(self._errors) == 0,
            errors=self._errors.copy()
        )


# Lookup-specific validators

def validate_search_query(query: str) -> str:
    """Validate a keyword search and return it trimmed."""
    (Validator()
        .field("query", query)
        .required("Search query cannot be empty")
        .is_string("Search query must be a string")
        .not_blank("Search query cannot be empty")
        .validate()
        .raise_if_invalid())
    return query.strip()


def validate_hsn_code(code: str) -> str:
    """Validate an HSN/SAC code (4-8 digits) and return it trimmed."""
    (Validator()
        .field("hsn_code", code)
        .required("HSN code cannot be empty")
        .is_string("HSN code must be a string")
        .not_blank("HSN code cannot be empty")
        .regex(HSN_CODE_PATTERN, "Invalid HSN code format. Must be 4-8 digits.")
        .validate()
        .raise_if_invalid())
    return code.strip()
