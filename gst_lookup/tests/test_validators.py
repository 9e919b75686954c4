# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""Tests for input validation utilities"""

import unittest

from gst_lookup.exceptions import InvalidArgumentError
from gst_lookup.utils.validators import (
    Validator,
    validate_hsn_code,
    validate_search_query,
)


class TestValidator(unittest.TestCase):
    """Chainable validator"""

    def test_required_stops_chain(self):
        result = Validator().field("code", "").required().regex(r"[0-9]+").validate()

        self.assertFalse(result.is_valid)
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.errors[0].code, "required")

    def test_errors_accumulate_across_fields(self):
        result = (Validator()
            .field("a", "x").regex(r"[0-9]+")
            .field("b", 0).positive_int()
            .validate())

        self.assertEqual([e.field for e in result.errors], ["a", "b"])

    def test_raise_if_invalid(self):
        result = Validator().field("query", "  ").not_blank("blank!").validate()

        with self.assertRaises(InvalidArgumentError) as ctx:
            result.raise_if_invalid()

        self.assertEqual(ctx.exception.field, "query")
        self.assertEqual(ctx.exception.message, "blank!")
        self.assertEqual(ctx.exception.errors, ["query: blank!"])

    def test_valid_chain(self):
        result = Validator().field("code", "0401").required().is_string().regex(r"[0-9]{4}").validate()
        self.assertTrue(result.is_valid)
        result.raise_if_invalid()


class TestLookupValidators(unittest.TestCase):
    """Search query and HSN code validators"""

    def test_search_query_trimmed(self):
        self.assertEqual(validate_search_query("  milk "), "milk")

    def test_search_query_blank(self):
        with self.assertRaises(InvalidArgumentError) as ctx:
            validate_search_query("   ")
        self.assertEqual(ctx.exception.message, "Search query cannot be empty")

    def test_hsn_code_lengths(self):
        for code in ("0401", "04012", "040120", "0401200", "04012000"):
            with self.subTest(code=code):
                self.assertEqual(validate_hsn_code(code), code)

    def test_hsn_code_empty_message(self):
        with self.assertRaises(InvalidArgumentError) as ctx:
            validate_hsn_code("")
        self.assertEqual(ctx.exception.message, "HSN code cannot be empty")

    def test_hsn_code_format_message(self):
        with self.assertRaises(InvalidArgumentError) as ctx:
            validate_hsn_code("12a")
        self.assertEqual(ctx.exception.message, "Invalid HSN code format. Must be 4-8 digits.")
