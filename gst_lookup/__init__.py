# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
GST Lookup - HSN/SAC Tax Lookup Client for India GST

Wraps the FastGST tax lookup service (api.taxlookup.fastgst.in):
- Keyword search over HSN/SAC descriptions
- HSN hierarchy (chapter / heading / sub-heading)
- GST rates and cess for a code
- Combined hierarchy + tax lookup in one call

Every request carries an RPAK (Restricted Public Access Key) header,
a short-lived obfuscated key derived from the current UTC time.
"""

__version__ = "1.0.0"
