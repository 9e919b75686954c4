# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""Display formatting for GST rates and amounts."""

from typing import Any

DEFAULT_CURRENCY_SYMBOL = "₹"


def format_gst_rate(rate: Any) -> str:
    """Format a GST rate for display, e.g. 18 -> "18%"."""
    return f"{rate}%"


def format_currency(value: Any, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """
    Format an amount with the currency symbol.

    The service reports exempt items as text such as "Nil" or "No Cess";
    any string containing "no" is returned unchanged.
    """
    if isinstance(value, str) and "no" in value.lower():
        return value
    return f"{symbol}{value}"
