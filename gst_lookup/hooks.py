# -*- coding: utf-8 -*-
# Copyright (c) 2024, Digital Consulting Service LLC (Mongolia)
# License: GNU General Public License v3

"""
GST Lookup - HSN/SAC tax lookup page and client

The lookup page is a static site; the build itself is done by an
external template engine. This module only declares how it is laid out.
"""

app_name = "gst_lookup"
app_title = "GST Lookup"
app_publisher = "Digital Consulting Service LLC (Mongolia)"
app_description = "HSN/SAC code search and GST rate lookup backed by the FastGST tax lookup API."
app_license = "gpl-3.0"

# Site Build
# ----------
site_dirs = {
    "input": "src",
    "output": "_site",
    "includes": "_includes",
    "layouts": "_layouts",
}

# Template formats recognised by the site build
site_template_formats = ["html", "njk", "md"]

# Engine used to pre-process .html templates
site_html_template_engine = "njk"

# Static assets copied to the output as-is
site_passthrough_copy = [
    "src/images",
    "src/robots.txt",
]
