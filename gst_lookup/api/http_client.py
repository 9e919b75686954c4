# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
GST Lookup API - HTTP Client Module

Handles all HTTP communication with the FastGST tax lookup service.
Every request carries a freshly generated RPAK key in X-API-Key.
"""

import time
from typing import Any

import requests

from gst_lookup.api.pool import SessionPool
from gst_lookup.api.rpak import RPAKDeriver, get_codec
from gst_lookup.exceptions import GSTLookupAPIError, GSTLookupConnectionError
from gst_lookup.utils.config import GSTLookupSettings, validate_config
from gst_lookup.utils.logging import get_logger

logger = get_logger("gst_lookup.http")

API_KEY_HEADER = "X-API-Key"
EXT_HEADER = "ext-headers"
_MASKED_HEADERS = {API_KEY_HEADER.lower()}


class GSTLookupHTTPClient:
	"""
	HTTP client for the tax lookup service.

	Key features:
	- RPAK key generated per request (nothing shared between calls)
	- Pooled sessions, one per thread
	- Non-2xx responses raised as GSTLookupAPIError
	- Transport failures raised as GSTLookupConnectionError
	- Debug mode request/response logging with the key masked
	"""

	def __init__(self, settings=None, deriver=None, pool=None):
		"""
		Initialize HTTP client.

		Args:
			settings: GSTLookupSettings or None to read the environment
			deriver: RPAKDeriver or None to build one from settings
			pool: SessionPool or None to build one from settings
		"""
		self.settings = settings or GSTLookupSettings.from_env()
		validate_config(self.settings).raise_if_invalid()

		self.deriver = deriver or RPAKDeriver(codec=get_codec(self.settings.key_codec))
		self.pool = pool or SessionPool(
			pool_connections=self.settings.pool_connections,
			pool_maxsize=self.settings.pool_maxsize,
			max_retries=self.settings.max_retries
		)

	@property
	def base_url(self):
		"""Get API base URL"""
		return self.settings.api_base_url.rstrip("/")

	@property
	def timeout(self):
		"""Get request timeout (None = transport default)"""
		return self.settings.timeout

	@property
	def debug_mode(self):
		return self.settings.debug_mode

	def _build_url(self, path):
		"""Build full URL from endpoint path"""
		if path.startswith(("http://", "https://")):
			return path

		if path.startswith("/"):
			return f"{self.base_url}{path}"

		return f"{self.base_url}/{path}"

	def _get_headers(self, extra_headers=None):
		"""
		Build request headers.

		Args:
			extra_headers: Caller headers, merged over the defaults

		Returns:
			dict: Complete headers
		"""
		headers = {
			API_KEY_HEADER: self.deriver.generate(
				self.settings.key_validity_seconds,
				self.settings.key_payload
			),
			EXT_HEADER: self.settings.ext_header_value,
			"Content-Type": "application/json",
			"Accept": "application/json"
		}

		if extra_headers:
			headers.update(extra_headers)

		return headers

	def _log_request(self, method, url, headers, params=None):
		"""Log request details in debug mode"""
		if not self.debug_mode:
			return

		safe_headers = {
			k: ("***" if k.lower() in _MASKED_HEADERS else v)
			for k, v in headers.items()
		}
		logger.debug(
			"Lookup API request",
			http_method=method,
			url=url,
			headers=safe_headers,
			params=params
		)

	def _log_response(self, response, duration_ms):
		"""Log response details in debug mode"""
		if not self.debug_mode:
			return

		logger.debug(
			"Lookup API response",
			status_code=response.status_code,
			duration_ms=round(duration_ms, 2),
			body=response.text[:2000]
		)

	def _handle_response(self, method, url, response, duration_ms):
		"""
		Handle API response.

		Returns:
			Parsed JSON body

		Raises:
			GSTLookupAPIError: On non-2xx status or a body that is not JSON
		"""
		status = response.status_code

		if not 200 <= status < 300:
			body = response.text
			logger.api_call(method, url, status_code=status, duration_ms=duration_ms, error=body[:500])
			raise GSTLookupAPIError(
				f"API Error: {status} {response.reason or ''}".rstrip(),
				status_code=status,
				response_body=body
			)

		try:
			data = response.json()
		except ValueError as e:
			logger.api_call(method, url, status_code=status, duration_ms=duration_ms, error="invalid JSON")
			raise GSTLookupAPIError(
				f"API returned invalid JSON (HTTP {status})",
				status_code=status,
				response_body=response.text
			) from e

		logger.api_call(method, url, status_code=status, duration_ms=duration_ms)
		return data

	def request(self, path, method="GET", headers=None, params=None, json=None) -> Any:
		"""
		Make a request to the lookup API.

		Args:
			path: Endpoint path (or absolute URL)
			method: HTTP method, GET unless overridden
			headers: Additional headers
			params: Query parameters
			json: Request body (dict)

		Returns:
			Parsed JSON response
		"""
		url = self._build_url(path)
		request_headers = self._get_headers(headers)

		self._log_request(method, url, request_headers, params=params)

		start_time = time.monotonic()
		try:
			response = self.pool.session.request(
				method,
				url,
				headers=request_headers,
				params=params,
				json=json,
				timeout=self.timeout
			)
		except requests.exceptions.Timeout as e:
			logger.api_call(method, url, error=f"timeout: {e}")
			raise GSTLookupConnectionError(f"Request timeout after {self.timeout}s") from e
		except requests.exceptions.RequestException as e:
			logger.api_call(method, url, error=f"connection: {e}")
			raise GSTLookupConnectionError(f"Connection error: {e!s}") from e

		duration_ms = (time.monotonic() - start_time) * 1000
		self._log_response(response, duration_ms)

		return self._handle_response(method, url, response, duration_ms)

	def get(self, path, headers=None, params=None):
		"""Make GET request to the lookup API"""
		return self.request(path, headers=headers, params=params)

	def close(self):
		self.pool.close()

	def __enter__(self):
		return self

	def __exit__(self, exc_type, exc, tb):
		self.close()


def get_http_client(settings=None):
	"""Get lookup HTTP client instance"""
	return GSTLookupHTTPClient(settings)
