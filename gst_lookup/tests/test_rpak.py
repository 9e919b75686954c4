# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
Tests for the RPAK key module

Covers key layout, round trips, the validity window, every structural
rejection and the two documented fixed-width limitations.
"""

import base64
import unittest
from datetime import datetime, timedelta, timezone

from gst_lookup.api.rpak import (
    Latin1Base64Codec,
    RejectedKey,
    RejectionReason,
    RPAKDeriver,
    Utf8Base64Codec,
    VerifiedKey,
    _parse_leading_int,
    date_code,
    epoch_seconds,
    generate_key,
    get_codec,
    validate_key,
)
from gst_lookup.exceptions import GSTLookupConfigError, InvalidArgumentError

ISSUED_AT = datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc)


def fixed_clock(moment):
    return lambda: moment


def raw_token(plaintext):
    """Build a key by hand from plaintext, bypassing the deriver"""
    obfuscated = "".join(chr(ord(ch) ^ 42) for ch in reversed(plaintext))
    return "RPAK_" + base64.b64encode(obfuscated.encode("utf-8")).decode("ascii")


class TestDateHelpers(unittest.TestCase):
    """Date code and epoch helpers"""

    def test_date_code_is_ddmmyyyy(self):
        self.assertEqual(date_code(datetime(2024, 1, 15, tzinfo=timezone.utc)), 15012024)
        self.assertEqual(date_code(datetime(2024, 12, 3, tzinfo=timezone.utc)), 3122024)

    def test_date_code_uses_utc(self):
        """A moment late on the 14th in UTC-5 is already the 15th in UTC"""
        eastern = timezone(timedelta(hours=-5))
        self.assertEqual(date_code(datetime(2024, 1, 14, 22, 0, tzinfo=eastern)), 15012024)

    def test_epoch_seconds(self):
        self.assertEqual(epoch_seconds(datetime(2024, 1, 15, tzinfo=timezone.utc)), 1705276800)

    def test_parse_leading_int(self):
        self.assertEqual(_parse_leading_int("60"), 60)
        self.assertEqual(_parse_leading_int("6a"), 6)
        self.assertEqual(_parse_leading_int(" 7"), 7)
        self.assertEqual(_parse_leading_int("-3"), -3)
        self.assertIsNone(_parse_leading_int("a6"))
        self.assertIsNone(_parse_leading_int(""))


class TestGenerate(unittest.TestCase):
    """Key generation"""

    def setUp(self):
        self.deriver = RPAKDeriver(clock=fixed_clock(datetime(2024, 1, 15, tzinfo=timezone.utc)))

    def test_key_layout(self):
        """Prefix, base64, XOR 42 and reversal all line up"""
        token = self.deriver.generate(60, "{}")

        self.assertTrue(token.startswith("RPAK_"))
        decoded = base64.b64decode(token[len("RPAK_"):]).decode("utf-8")
        plaintext = "".join(chr(ord(ch) ^ 42) for ch in decoded)[::-1]

        # 1705276800 + 15012024
        self.assertEqual(plaintext, "601720288824|{}")

    def test_validity_zero_padded(self):
        token = self.deriver.generate(5, "x")
        result = self.deriver.validate(token)
        self.assertEqual(result.validity_seconds, 5)

    def test_same_inputs_same_key(self):
        self.assertEqual(self.deriver.generate(30, "abc"), self.deriver.generate(30, "abc"))

    def test_invalid_validity(self):
        for bad in (0, -1, "5", 1.5, True, None):
            with self.subTest(validity=bad):
                with self.assertRaises(InvalidArgumentError):
                    self.deriver.generate(bad, "payload")

    def test_invalid_payload(self):
        for bad in ("", None, 5):
            with self.subTest(payload=bad):
                with self.assertRaises(InvalidArgumentError) as ctx:
                    self.deriver.generate(10, bad)
                self.assertEqual(ctx.exception.field, "payload")


class TestValidate(unittest.TestCase):
    """Key validation"""

    def test_round_trip_payload(self):
        deriver = RPAKDeriver()
        for validity in (1, 5, 42, 99):
            for payload in ("Hello how are you", "{}", '{"a": 1}', "x"):
                with self.subTest(validity=validity, payload=payload):
                    result = deriver.validate(deriver.generate(validity, payload))
                    self.assertEqual(result.payload, payload)

    def test_valid_immediately_after_generation(self):
        deriver = RPAKDeriver()
        result = deriver.validate(deriver.generate(10, "payload"))

        self.assertIsInstance(result, VerifiedKey)
        self.assertTrue(result.valid)
        self.assertGreaterEqual(result.elapsed_seconds, 0)
        self.assertLessEqual(result.elapsed_seconds, 10)
        self.assertFalse(result.expired)
        self.assertFalse(result.not_yet_valid)

    def test_fixed_clock_fields(self):
        token = RPAKDeriver(clock=fixed_clock(ISSUED_AT)).generate(30, "p")
        result = RPAKDeriver(clock=fixed_clock(ISSUED_AT + timedelta(seconds=12))).validate(token)

        self.assertEqual(result.issue_epoch, epoch_seconds(ISSUED_AT))
        self.assertEqual(result.verify_epoch, epoch_seconds(ISSUED_AT) + 12)
        self.assertEqual(result.elapsed_seconds, 12)
        self.assertTrue(result.valid)

    def test_window_edge_is_inclusive(self):
        token = RPAKDeriver(clock=fixed_clock(ISSUED_AT)).generate(30, "p")
        result = RPAKDeriver(clock=fixed_clock(ISSUED_AT + timedelta(seconds=30))).validate(token)

        self.assertTrue(result.valid)
        self.assertFalse(result.expired)

    def test_expired(self):
        token = RPAKDeriver(clock=fixed_clock(ISSUED_AT)).generate(30, "p")
        result = RPAKDeriver(clock=fixed_clock(ISSUED_AT + timedelta(seconds=31))).validate(token)

        self.assertFalse(result.valid)
        self.assertTrue(result.expired)
        self.assertFalse(result.not_yet_valid)
        self.assertEqual(result.payload, "p")

    def test_not_yet_valid(self):
        token = RPAKDeriver(clock=fixed_clock(ISSUED_AT)).generate(30, "p")
        result = RPAKDeriver(clock=fixed_clock(ISSUED_AT - timedelta(seconds=5))).validate(token)

        self.assertFalse(result.valid)
        self.assertTrue(result.not_yet_valid)
        self.assertFalse(result.expired)
        self.assertEqual(result.elapsed_seconds, -5)

    def test_payload_with_delimiter(self):
        deriver = RPAKDeriver()
        for payload in ("a|b", "|", "a||b|"):
            with self.subTest(payload=payload):
                self.assertEqual(deriver.validate(deriver.generate(10, payload)).payload, payload)

    def test_to_dict(self):
        token = RPAKDeriver(clock=fixed_clock(ISSUED_AT)).generate(30, "p")
        data = RPAKDeriver(clock=fixed_clock(ISSUED_AT)).validate(token).to_dict()

        self.assertEqual(data["valid"], True)
        self.assertEqual(data["validity_seconds"], 30)
        self.assertEqual(data["elapsed_seconds"], 0)
        self.assertEqual(data["payload"], "p")


class TestRejections(unittest.TestCase):
    """Every structural rejection comes back as a RejectedKey"""

    def setUp(self):
        self.deriver = RPAKDeriver()

    def assertRejected(self, token, reason):
        result = self.deriver.validate(token)
        self.assertIsInstance(result, RejectedKey)
        self.assertFalse(result.valid)
        self.assertEqual(result.reason, reason)
        return result

    def test_missing_prefix(self):
        result = self.assertRejected("not-a-token", RejectionReason.MISSING_PREFIX)
        self.assertIn("prefix", result.error)

    def test_missing_prefix_for_empty_and_none(self):
        self.assertRejected("", RejectionReason.MISSING_PREFIX)
        self.assertRejected(None, RejectionReason.MISSING_PREFIX)

    def test_garbage_base64(self):
        token = "RPAK_" + base64.b64encode(b"garbage").decode("ascii")
        self.assertRejected(token, RejectionReason.MISSING_DELIMITER)

    def test_malformed_base64(self):
        result = self.assertRejected("RPAK_***not base64***", RejectionReason.DECODE_FAILED)
        self.assertTrue(result.error.startswith("Validation error:"))

    def test_undecodable_bytes(self):
        token = "RPAK_" + base64.b64encode(b"\xff\xfe\xfd").decode("ascii")
        self.assertRejected(token, RejectionReason.DECODE_FAILED)

    def test_unparsable_validity(self):
        self.assertRejected(raw_token("ab1720288824|p"), RejectionReason.UNPARSABLE_VALIDITY)

    def test_unparsable_combined(self):
        self.assertRejected(raw_token("60xyz|p"), RejectionReason.UNPARSABLE_COMBINED)
        self.assertRejected(raw_token("6|p"), RejectionReason.UNPARSABLE_COMBINED)

    def test_oversized_combined_value(self):
        """A combined value too long to convert is rejected, not raised"""
        self.assertRejected(raw_token("60" + "1" * 5000 + "|{}"), RejectionReason.UNPARSABLE_COMBINED)

    def test_rejection_to_dict(self):
        data = self.deriver.validate("nope").to_dict()
        self.assertEqual(data, {
            "valid": False,
            "reason": "missing_prefix",
            "error": "Invalid RPAK format: Missing RPAK_ prefix",
        })


class TestFixedWidthLimitations(unittest.TestCase):
    """Documented boundary behaviour of the fixed-width fields"""

    def test_validity_over_99_is_read_back_truncated(self):
        """150 encodes as '150...' and reads back as validity 15"""
        deriver = RPAKDeriver(clock=fixed_clock(ISSUED_AT))

        with self.assertLogs("gst_lookup.rpak", level="WARNING") as logs:
            token = deriver.generate(150, "p")

        self.assertIn("overflows", logs.output[0])
        result = deriver.validate(token)
        self.assertEqual(result.validity_seconds, 15)
        self.assertEqual(result.elapsed_seconds, 0)
        self.assertTrue(result.valid)

    def test_validity_over_99_can_corrupt_issue_epoch(self):
        """123 leaves a stray '3' in front of the combined value"""
        deriver = RPAKDeriver(clock=fixed_clock(ISSUED_AT))
        with self.assertLogs("gst_lookup.rpak", level="WARNING"):
            token = deriver.generate(123, "p")

        result = deriver.validate(token)
        self.assertEqual(result.validity_seconds, 12)
        self.assertNotEqual(result.issue_epoch, epoch_seconds(ISSUED_AT))
        self.assertFalse(result.valid)

    def test_utc_midnight_rollover_shifts_issue_epoch(self):
        """Verifier subtracts its own date code, not the issuer's"""
        issued = datetime(2024, 3, 31, 23, 59, 50, tzinfo=timezone.utc)
        verified = datetime(2024, 4, 1, 0, 0, 5, tzinfo=timezone.utc)

        token = RPAKDeriver(clock=fixed_clock(issued)).generate(30, "p")
        result = RPAKDeriver(clock=fixed_clock(verified)).validate(token)

        shift = 31032024 - 1042024
        self.assertEqual(result.issue_epoch, epoch_seconds(issued) + shift)
        self.assertEqual(result.elapsed_seconds, 15 - shift)
        self.assertTrue(result.not_yet_valid)
        self.assertFalse(result.valid)


class TestCodecs(unittest.TestCase):
    """Base64 codec selection"""

    def test_get_codec(self):
        self.assertIsInstance(get_codec("utf8"), Utf8Base64Codec)
        self.assertIsInstance(get_codec("server"), Utf8Base64Codec)
        self.assertIsInstance(get_codec("latin1"), Latin1Base64Codec)
        self.assertIsInstance(get_codec("Browser"), Latin1Base64Codec)

    def test_unknown_codec(self):
        with self.assertRaises(GSTLookupConfigError):
            get_codec("ebcdic")

    def test_latin1_round_trip(self):
        deriver = RPAKDeriver(codec=Latin1Base64Codec())
        self.assertEqual(deriver.validate(deriver.generate(10, "café")).payload, "café")

    def test_latin1_rejects_wide_characters(self):
        deriver = RPAKDeriver(codec=Latin1Base64Codec())
        with self.assertRaises(InvalidArgumentError):
            deriver.generate(10, "₹100")

    def test_utf8_round_trip(self):
        deriver = RPAKDeriver(codec=Utf8Base64Codec())
        self.assertEqual(deriver.validate(deriver.generate(10, "₹100")).payload, "₹100")

    def test_ascii_keys_agree_across_codecs(self):
        clock = fixed_clock(ISSUED_AT)
        latin1 = RPAKDeriver(clock=clock, codec=Latin1Base64Codec()).generate(60, "{}")
        utf8 = RPAKDeriver(clock=clock, codec=Utf8Base64Codec()).generate(60, "{}")
        self.assertEqual(latin1, utf8)

    def test_module_helpers(self):
        token = generate_key(20, "hello", codec="latin1")
        result = validate_key(token, codec="latin1")
        self.assertTrue(result.valid)
        self.assertEqual(result.payload, "hello")
