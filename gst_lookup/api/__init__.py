# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
GST Lookup API Module

Provides the tax lookup client and the RPAK key used to call it.
"""

from gst_lookup.api.client import GSTLookupClient, get_client
from gst_lookup.api.http_client import GSTLookupHTTPClient, get_http_client
from gst_lookup.api.rpak import (
    RejectedKey,
    RejectionReason,
    RPAKDeriver,
    VerifiedKey,
    generate_key,
    validate_key,
)

__all__ = [
    "GSTLookupClient",
    "GSTLookupHTTPClient",
    "RPAKDeriver",
    "RejectedKey",
    "RejectionReason",
    "VerifiedKey",
    "generate_key",
    "get_client",
    "get_http_client",
    "validate_key",
]
