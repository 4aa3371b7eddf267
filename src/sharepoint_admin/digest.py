# -*- coding: utf-8 -*-
"""
Request digest caching for SharePoint mutating requests.
"""

from datetime import datetime, timedelta

from .errors import ProtocolError
from .spo_client import get_request_digest
from .utils import is_debug_enabled

# Digests are treated as expired this long before the server says they are
DIGEST_SAFETY_MARGIN = timedelta(seconds=5)


class FormDigest:
    """Request digest value and the moment it stops being usable"""

    def __init__(self, value, expires_at):
        self.value = value
        self.expires_at = expires_at

    def is_valid(self, now):
        return now < self.expires_at


class DigestManager:
    """
    Supplies a valid request digest for a site, fetching one only when needed.

    Args:
        site_url (str): Site the digest is issued for (tenant admin site)
        access_token (str): Bearer token for the SharePoint resource
        clock (callable): Returns the current datetime; replaceable in tests
    """

    def __init__(self, site_url, access_token, clock=datetime.now):
        self.site_url = site_url
        self.access_token = access_token
        self.clock = clock
        self.digest = None

    def ensure_digest(self):
        """
        Return the cached digest if still valid, otherwise fetch a new one.

        Returns:
            FormDigest: A digest valid at the time of the call

        Raises:
            CommandError, ProtocolError: If the digest could not be retrieved
        """
        now = self.clock()
        if self.digest is not None and self.digest.is_valid(now):
            if is_debug_enabled():
                print("[DEBUG] Existing form digest still valid")
            return self.digest

        if is_debug_enabled():
            print(f"[DEBUG] Retrieving request digest for {self.site_url}...")
        context_info = get_request_digest(self.site_url, self.access_token)

        seconds = context_info['FormDigestTimeoutSeconds']
        try:
            timeout = timedelta(seconds=int(seconds))
        except (TypeError, ValueError, OverflowError):
            raise ProtocolError(f"Malformed context info response: invalid FormDigestTimeoutSeconds {seconds!r}")
        self.digest = FormDigest(context_info['FormDigestValue'], now + timeout - DIGEST_SAFETY_MARGIN)
        return self.digest
