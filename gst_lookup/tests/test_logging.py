# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""Tests for structured logging and the exception hierarchy"""

import json
import unittest

from gst_lookup.exceptions import (
    GSTLookupAggregateError,
    GSTLookupAPIError,
    GSTLookupError,
    InvalidArgumentError,
)
from gst_lookup.utils.logging import (
    CorrelationContext,
    StructuredLogger,
    correlation_scope,
    get_logger,
)


class TestStructuredLogger(unittest.TestCase):

    def test_json_line(self):
        log = StructuredLogger("gst_lookup.test")

        with correlation_scope("abc123"):
            with self.assertLogs("gst_lookup.test", level="INFO") as logs:
                log.info("Lookup complete", hsn_code="0401")

        entry = json.loads(logs.records[0].getMessage())
        self.assertEqual(entry["level"], "INFO")
        self.assertEqual(entry["logger"], "gst_lookup.test")
        self.assertEqual(entry["correlation_id"], "abc123")
        self.assertEqual(entry["message"], "Lookup complete")
        self.assertEqual(entry["data"], {"hsn_code": "0401"})

    def test_api_call_error_level(self):
        log = StructuredLogger("gst_lookup.test")

        with self.assertLogs("gst_lookup.test", level="INFO") as logs:
            log.api_call("GET", "https://x/search/hsn", status_code=500, duration_ms=12.3456, error="boom")

        self.assertEqual(logs.records[0].levelname, "ERROR")
        entry = json.loads(logs.records[0].getMessage())
        self.assertEqual(entry["data"]["duration_ms"], 12.35)

    def test_get_logger(self):
        self.assertIs(get_logger(), get_logger())
        self.assertEqual(get_logger("gst_lookup.other").name, "gst_lookup.other")


class TestCorrelationContext(unittest.TestCase):

    def test_scope_restores_previous_id(self):
        CorrelationContext.set_id("outer")
        with correlation_scope("inner") as correlation_id:
            self.assertEqual(correlation_id, "inner")
            self.assertEqual(CorrelationContext.get_id(), "inner")
        self.assertEqual(CorrelationContext.get_id(), "outer")
        CorrelationContext.clear()

    def test_generated_id_is_stable(self):
        CorrelationContext.clear()
        first = CorrelationContext.get_id()
        self.assertEqual(CorrelationContext.get_id(), first)
        self.assertEqual(len(first), 12)
        CorrelationContext.clear()


class TestExceptions(unittest.TestCase):

    def test_hierarchy(self):
        for exc_type in (InvalidArgumentError, GSTLookupAPIError, GSTLookupAggregateError):
            self.assertTrue(issubclass(exc_type, GSTLookupError))

    def test_to_dict(self):
        error = GSTLookupAPIError("API Error: 404", status_code=404, response_body="nope")
        self.assertEqual(error.to_dict(), {
            "error": "GSTLookupAPIError",
            "message": "API Error: 404",
            "code": "API_ERROR",
            "details": {"status_code": 404},
        })
        self.assertEqual(str(error), "[API_ERROR] API Error: 404")

    def test_aggregate_details(self):
        inner = InvalidArgumentError("bad", field="hsn_code")
        error = GSTLookupAggregateError("Failed", errors=[inner])
        self.assertEqual(error.errors, [inner])
        self.assertEqual(error.details, {"errors": ["[INVALID_ARGUMENT] bad"]})
