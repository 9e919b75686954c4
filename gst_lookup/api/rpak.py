# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
RPAK (Restricted Public Access Key) Module

Generates and validates the time-windowed keys sent in the X-API-Key
header of every lookup request.

Key layout (before encoding):
	<validity:2 digits><epoch + DDMMYYYY as integer>|<payload>

The plaintext is reversed, XOR'd with a fixed byte and base64 encoded,
then prefixed with "RPAK_". This is obfuscation with a validity window,
not a security mechanism: anyone holding a key can read and re-create it.

Known limitations:
- Validity has a fixed 2-digit field. Values above 99 are still encoded
  but the verifier reads only the first two digits.
- The verifier subtracts *its own* UTC date code. A key issued before
  UTC midnight and checked after it recovers a shifted issue epoch.
"""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Protocol, Union

from gst_lookup.exceptions import GSTLookupConfigError, InvalidArgumentError
from gst_lookup.utils.logging import get_logger
from gst_lookup.utils.validators import Validator

RPAK_PREFIX = "RPAK_"
KEY_DELIMITER = "|"
XOR_KEY = 42
VALIDITY_WIDTH = 2
MAX_ENCODABLE_VALIDITY = 10 ** VALIDITY_WIDTH - 1
DATE_CODE_FORMAT = "%d%m%Y"

# parseInt semantics: optional whitespace and sign, digits, trailing junk ignored
_LEADING_INT_RE = re.compile(r"\s*([+-]?[0-9]+)")

Clock = Callable[[], datetime]

logger = get_logger("gst_lookup.rpak")


def utc_now() -> datetime:
	"""Return timezone-aware UTC now."""
	return datetime.now(timezone.utc)


def epoch_seconds(moment: datetime) -> int:
	"""Whole Unix seconds for an aware datetime."""
	return int(moment.timestamp())


def date_code(moment: datetime) -> int:
	"""UTC calendar date of `moment` as a DDMMYYYY integer."""
	return int(moment.astimezone(timezone.utc).strftime(DATE_CODE_FORMAT))


# =========================================================================
# Base64 text codecs
# =========================================================================

class Base64Codec(Protocol):
	"""Text <-> base64 capability, one implementation per target platform."""

	name: str

	def encode(self, text: str) -> str:
		...

	def decode(self, data: str) -> str:
		...


class Latin1Base64Codec:
	"""
	Browser semantics (btoa/atob).

	Each character maps to a single byte; characters above U+00FF
	cannot be encoded.
	"""

	name = "latin1"

	def encode(self, text: str) -> str:
		try:
			raw = text.encode("latin-1")
		except UnicodeEncodeError as exc:
			raise InvalidArgumentError(
				"Payload contains characters outside Latin-1 and cannot be encoded",
				field="payload"
			) from exc
		return base64.b64encode(raw).decode("ascii")

	def decode(self, data: str) -> str:
		return base64.b64decode(data, validate=True).decode("latin-1")


class Utf8Base64Codec:
	"""Server semantics: characters are UTF-8 encoded before base64."""

	name = "utf8"

	def encode(self, text: str) -> str:
		try:
			raw = text.encode("utf-8")
		except UnicodeEncodeError as exc:
			raise InvalidArgumentError(
				"Payload cannot be encoded as UTF-8 after obfuscation",
				field="payload"
			) from exc
		return base64.b64encode(raw).decode("ascii")

	def decode(self, data: str) -> str:
		return base64.b64decode(data, validate=True).decode("utf-8")


CODECS = {
	"latin1": Latin1Base64Codec,
	"browser": Latin1Base64Codec,
	"utf8": Utf8Base64Codec,
	"server": Utf8Base64Codec,
}


def get_codec(name: str = "utf8") -> Base64Codec:
	"""Resolve a codec by platform name ("utf8"/"server", "latin1"/"browser")."""
	try:
		return CODECS[name.strip().lower()]()
	except (KeyError, AttributeError) as exc:
		raise GSTLookupConfigError(f"Unknown key codec: {name!r}") from exc


# =========================================================================
# Verification results
# =========================================================================

class RejectionReason(str, Enum):
	"""Structural reasons a key cannot be read."""

	MISSING_PREFIX = "missing_prefix"
	DECODE_FAILED = "decode_failed"
	MISSING_DELIMITER = "missing_delimiter"
	UNPARSABLE_VALIDITY = "unparsable_validity"
	UNPARSABLE_COMBINED = "unparsable_combined"


@dataclass(frozen=True)
class VerifiedKey:
	"""A structurally sound key, with its window evaluated at verify time."""

	validity_seconds: int
	issue_epoch: int
	verify_epoch: int
	elapsed_seconds: int
	payload: str

	@property
	def expired(self) -> bool:
		return self.elapsed_seconds > self.validity_seconds

	@property
	def not_yet_valid(self) -> bool:
		return self.elapsed_seconds < 0

	@property
	def valid(self) -> bool:
		return 0 <= self.elapsed_seconds <= self.validity_seconds

	def to_dict(self) -> dict[str, Any]:
		return {
			"valid": self.valid,
			"validity_seconds": self.validity_seconds,
			"issue_epoch": self.issue_epoch,
			"verify_epoch": self.verify_epoch,
			"elapsed_seconds": self.elapsed_seconds,
			"payload": self.payload,
			"expired": self.expired,
			"not_yet_valid": self.not_yet_valid,
		}


@dataclass(frozen=True)
class RejectedKey:
	"""A key that could not be decoded or parsed."""

	reason: RejectionReason
	error: str

	@property
	def valid(self) -> bool:
		return False

	def to_dict(self) -> dict[str, Any]:
		return {"valid": False, "reason": self.reason.value, "error": self.error}


VerificationResult = Union[VerifiedKey, RejectedKey]


# =========================================================================
# Deriver
# =========================================================================

def _xor(text: str, key: int) -> str:
	return "".join(chr(ord(ch) ^ key) for ch in text)


def _parse_leading_int(text: str) -> int | None:
	match = _LEADING_INT_RE.match(text)
	if match is None:
		return None
	try:
		return int(match.group(1))
	except ValueError:
		# beyond the interpreter's int string conversion limit
		return None


class RPAKDeriver:
	"""
	Generates and validates RPAK keys.

	Holds no mutable state; construct one per client or per call.

	Usage:
		deriver = RPAKDeriver()
		key = deriver.generate(60, "{}")
		result = deriver.validate(key)
		if result.valid:
			...
	"""

	def __init__(self, clock: Clock | None = None, codec: Base64Codec | None = None, xor_key: int = XOR_KEY):
		"""
		Args:
			clock: Returns the current aware UTC datetime
			codec: Base64 text codec, chosen once per deriver
			xor_key: Byte XOR'd into every character
		"""
		self._clock = clock or utc_now
		self._codec = codec or Utf8Base64Codec()
		self.xor_key = xor_key

	@property
	def codec(self) -> Base64Codec:
		return self._codec

	def generate(self, validity_seconds: int, payload: str) -> str:
		"""
		Create a key valid for `validity_seconds` carrying `payload`.

		Raises:
			InvalidArgumentError: validity is not a positive integer or
				payload is not a non-empty string
		"""
		(Validator()
			.field("validity_seconds", validity_seconds)
			.positive_int("Validity must be a positive number")
			.field("payload", payload)
			.required("Payload must be a non-empty string")
			.is_string("Payload must be a non-empty string")
			.validate()
			.raise_if_invalid())

		now = self._clock()
		combined = epoch_seconds(now) + date_code(now)
		header = f"{self._format_validity(validity_seconds)}{combined}"
		plaintext = f"{header}{KEY_DELIMITER}{payload}"

		encoded = self._codec.encode(_xor(plaintext[::-1], self.xor_key))
		return f"{RPAK_PREFIX}{encoded}"

	def _format_validity(self, validity_seconds: int) -> str:
		if validity_seconds > MAX_ENCODABLE_VALIDITY:
			logger.warning(
				"Key validity overflows fixed-width field",
				validity_seconds=validity_seconds,
				width=VALIDITY_WIDTH,
				read_back_as=int(str(validity_seconds)[:VALIDITY_WIDTH]),
			)
		return str(validity_seconds).zfill(VALIDITY_WIDTH)

	def validate(self, token: str) -> VerificationResult:
		"""
		Decode `token` and evaluate its validity window.

		Never raises; structural problems come back as RejectedKey.
		"""
		if not isinstance(token, str) or not token.startswith(RPAK_PREFIX):
			return RejectedKey(RejectionReason.MISSING_PREFIX, "Invalid RPAK format: Missing RPAK_ prefix")

		try:
			decoded = self._codec.decode(token[len(RPAK_PREFIX):])
		except ValueError as exc:
			return RejectedKey(RejectionReason.DECODE_FAILED, f"Validation error: {exc}")

		plaintext = _xor(decoded, self.xor_key)[::-1]

		header, delimiter, payload = plaintext.partition(KEY_DELIMITER)
		if not delimiter:
			return RejectedKey(RejectionReason.MISSING_DELIMITER, "Invalid RPAK format: Missing pipe delimiter")

		validity_seconds = _parse_leading_int(header[:VALIDITY_WIDTH])
		if validity_seconds is None:
			return RejectedKey(RejectionReason.UNPARSABLE_VALIDITY, "Invalid RPAK format: Cannot parse validity")

		combined = _parse_leading_int(header[VALIDITY_WIDTH:])
		if combined is None:
			return RejectedKey(RejectionReason.UNPARSABLE_COMBINED, "Invalid RPAK format: Cannot parse combined value")

		now = self._clock()
		issue_epoch = combined - date_code(now)
		verify_epoch = epoch_seconds(now)

		return VerifiedKey(
			validity_seconds=validity_seconds,
			issue_epoch=issue_epoch,
			verify_epoch=verify_epoch,
			elapsed_seconds=verify_epoch - issue_epoch,
			payload=payload,
		)


def generate_key(validity_seconds: int, payload: str, codec: str = "utf8") -> str:
	"""Generate a key with a default deriver"""
	return RPAKDeriver(codec=get_codec(codec)).generate(validity_seconds, payload)


def validate_key(token: str, codec: str = "utf8") -> VerificationResult:
	"""Validate a key with a default deriver"""
	return RPAKDeriver(codec=get_codec(codec)).validate(token)
