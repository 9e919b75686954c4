# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
GST Lookup API Client

Typed convenience calls over the FastGST tax lookup service:

1. search_by_keywords - Search HSN/SAC codes by product/service text
2. get_hierarchy - Chapter/heading/sub-heading tree for a code
3. get_tax_info - GST rates and cess for a code
4. get_complete_info - Hierarchy and tax info fetched in parallel

Every call is a single attempt: no retries, no caching, no rate limiting.
"""

import contextvars
import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait

from gst_lookup.api.http_client import GSTLookupHTTPClient
from gst_lookup.exceptions import GSTLookupAggregateError, GSTLookupAPIError
from gst_lookup.utils.formatting import format_currency, format_gst_rate
from gst_lookup.utils.logging import CorrelationContext, get_logger
from gst_lookup.utils.validators import validate_hsn_code, validate_search_query

logger = get_logger("gst_lookup.client")


class GSTLookupClient:
	"""
	Tax lookup client for HSN/SAC codes.

	Usage:
		client = GSTLookupClient()

		# Free-text search
		results = client.search_by_keywords("milk")

		# Rates for a code
		taxes = client.get_tax_info("0401")

		# Hierarchy and rates together
		info = client.get_complete_info("0401")
	"""

	# API endpoint paths (relative to base URL)
	ENDPOINTS = {
		"search": "/search/hsn",
		"hierarchy": "/search/hsn/{code}",
		"taxes": "/search/hsn/{code}/taxes",
	}

	def __init__(self, settings=None, http=None):
		"""
		Initialize lookup client.

		Args:
			settings: GSTLookupSettings or None to read the environment
			http: GSTLookupHTTPClient or None to build one from settings
		"""
		self.http = http or GSTLookupHTTPClient(settings)
		self.settings = self.http.settings
		self._executor = None
		self._executor_lock = threading.Lock()

	@property
	def base_url(self):
		return self.http.base_url

	def request(self, path, **options):
		"""Low-level request against the lookup service"""
		return self.http.request(path, **options)

	# =========================================================================
	# Search
	# =========================================================================

	def search_by_keywords(self, query):
		"""
		Search HSN/SAC codes by keywords.

		Args:
			query: Search term (product name, HSN code, etc.)

		Returns:
			dict: {"data": [...matches...], "meta": {"request_id": ...}}

		Raises:
			InvalidArgumentError: Query is empty or whitespace
		"""
		query = validate_search_query(query)
		return self.http.get(self.ENDPOINTS["search"], params={"query": query})

	# =========================================================================
	# Per-code lookups
	# =========================================================================

	def get_hierarchy(self, hsn_code):
		"""
		Get hierarchy details for an HSN code.

		Args:
			hsn_code: 4-8 digit HSN/SAC code

		Raises:
			InvalidArgumentError: Code is empty or not 4-8 digits
		"""
		code = validate_hsn_code(hsn_code)
		return self.http.get(self.ENDPOINTS["hierarchy"].format(code=code))

	def get_tax_info(self, hsn_code):
		"""
		Get tax information (GST rates, cess) for an HSN code.

		Args:
			hsn_code: 4-8 digit HSN/SAC code

		Raises:
			InvalidArgumentError: Code is empty or not 4-8 digits
		"""
		code = validate_hsn_code(hsn_code)
		return self.http.get(self.ENDPOINTS["taxes"].format(code=code))

	def get_complete_info(self, hsn_code):
		"""
		Fetch hierarchy and tax info in parallel and merge them.

		Both legs run on the client's two lookup workers. The first failure
		ends the join; the other leg is cancelled if it has not started.

		Returns:
			dict: success, hierarchy, tax_info and merged meta
				(hierarchy meta plus tax_request_id)

		Raises:
			InvalidArgumentError: Code is empty or not 4-8 digits
			GSTLookupAggregateError: Either leg failed
		"""
		code = validate_hsn_code(hsn_code)

		# Both legs log under the caller's correlation id
		CorrelationContext.get_id()

		executor = self._get_executor()
		futures = [
			executor.submit(contextvars.copy_context().run, self.get_hierarchy, code),
			executor.submit(contextvars.copy_context().run, self.get_tax_info, code),
		]
		wait(futures, return_when=FIRST_EXCEPTION)

		errors = [
			f.exception() for f in futures
			if f.done() and not f.cancelled() and f.exception() is not None
		]
		if errors:
			for f in futures:
				f.cancel()
			logger.error("Complete HSN lookup failed", hsn_code=code, errors=[str(e) for e in errors])
			raise GSTLookupAggregateError(
				"Failed to get complete HSN info: " + "; ".join(str(e) for e in errors),
				errors=errors
			)

		hierarchy_data, tax_data = (f.result() for f in futures)
		return self._merge_complete_info(hierarchy_data, tax_data)

	def _get_executor(self):
		"""Two workers shared by every join, so the session pool sees a fixed set of threads"""
		with self._executor_lock:
			if self._executor is None:
				self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="gst-lookup")
			return self._executor

	def _merge_complete_info(self, hierarchy_data, tax_data):
		if not isinstance(hierarchy_data, dict) or not isinstance(tax_data, dict):
			raise GSTLookupAggregateError(
				"Failed to get complete HSN info: unexpected response shape",
				errors=[GSTLookupAPIError("Expected JSON objects from hierarchy and taxes endpoints")]
			)

		tax_meta = tax_data.get("meta") or {}
		meta = dict(hierarchy_data.get("meta") or {})
		meta["tax_request_id"] = tax_meta.get("request_id")

		return {
			"success": True,
			"hierarchy": hierarchy_data.get("data"),
			"tax_info": tax_data.get("data"),
			"meta": meta
		}

	# =========================================================================
	# Display helpers
	# =========================================================================

	def format_rate(self, rate):
		return format_gst_rate(rate)

	def format_currency(self, value):
		return format_currency(value, symbol=self.settings.currency_symbol)

	def close(self):
		"""Stop the lookup workers, then close pooled sessions"""
		with self._executor_lock:
			executor, self._executor = self._executor, None
		if executor is not None:
			executor.shutdown(wait=True, cancel_futures=True)
		self.http.close()

	def __enter__(self):
		return self

	def __exit__(self, *exc):
		self.close()


def get_client(settings=None):
	"""Get lookup client instance"""
	return GSTLookupClient(settings)
