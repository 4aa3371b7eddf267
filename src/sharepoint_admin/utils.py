# -*- coding: utf-8 -*-
"""
Shared utility functions for SharePoint admin commands.

This module provides the debug/verbose switches, XML escaping for CSOM
payloads and the common request headers.
"""

import os
import re
from xml.sax.saxutils import escape

from . import __version__

USER_AGENT = f"NONISV|SharePointAdmin|sharepoint-admin/{__version__}"

# Attribute-safe replacements applied after &, < and > are escaped
_XML_ATTRIBUTE_ENTITIES = {
    '"': '&quot;',
    "'": '&apos;',
    '\n': '&#xA;',
    '\r': '&#xD;',
    '\t': '&#x9;',
}

_SHAREPOINT_URL_PATTERN = re.compile(r'^https://[^/\s]+\.sharepoint\.[a-z.]+(/.*)?$', re.IGNORECASE)


def is_debug_enabled():
    """
    Check if debug mode is enabled via DEBUG environment variable.

    Debug mode prints request URLs, headers and raw response bodies.

    Returns:
        bool: True if debug mode is enabled, False otherwise
    """
    return os.environ.get('DEBUG', 'false').lower() == 'true'


def is_verbose_enabled():
    """
    Check if verbose mode is enabled via VERBOSE environment variable.

    Verbose mode prints progress messages (and polling dots). Debug mode
    implies verbose.

    Returns:
        bool: True if verbose or debug mode is enabled, False otherwise
    """
    return os.environ.get('VERBOSE', 'false').lower() == 'true' or is_debug_enabled()


def escape_xml(value):
    """
    Escape a value for use inside a CSOM XML element or attribute.

    Args:
        value (str): Raw text (site URL, classification name, ...)

    Returns:
        str: Text with &, <, >, quotes and control characters escaped
    """
    if value is None:
        return ''
    return escape(str(value), _XML_ATTRIBUTE_ENTITIES)


def is_valid_sharepoint_url(url):
    """
    Check whether a URL points at a SharePoint Online host.

    Args:
        url (str): URL to check (e.g. 'https://contoso.sharepoint.com/sites/x')

    Returns:
        bool: True if the URL is an absolute https SharePoint URL
    """
    if not url:
        return False
    return bool(_SHAREPOINT_URL_PATTERN.match(url.strip()))


def get_request_headers(headers):
    """
    Add the common headers (User-Agent, Accept-Encoding) to request headers.

    Args:
        headers (dict): Request specific headers

    Returns:
        dict: New dictionary with the common headers merged in
    """
    merged = {
        'User-Agent': USER_AGENT,
        'Accept-Encoding': 'gzip, deflate',
    }
    merged.update(headers)
    return merged


def redact_headers(headers):
    """Return a copy of headers safe for debug output"""
    redacted = dict(headers)
    for key in ('Authorization', 'X-RequestDigest'):
        if key in redacted:
            redacted[key] = redacted[key][:12] + '...'
    return redacted
