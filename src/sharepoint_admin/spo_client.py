# -*- coding: utf-8 -*-
"""
SharePoint Online REST and CSOM calls.

Both calls target the tenant admin site: the context info endpoint issues
request digests and ProcessQuery executes CSOM batches.
"""

from dotenv import load_dotenv

from .csom import PROCESS_QUERY_PATH
from .errors import CommandError, ProtocolError
from .transport import make_request

# Load environment variables
load_dotenv()


def _raise_for_status(response, action):
    """Raise CommandError describing a non-2xx SharePoint response"""
    if response.ok:
        return
    try:
        error = response.json()
        # odata=nometadata: {"odata.error": {"message": {"value": "..."}}}
        message = error.get('odata.error', error.get('error', {})).get('message', {})
        if isinstance(message, dict):
            message = message.get('value')
    except (ValueError, AttributeError):
        message = None
    raise CommandError(message or f"{action} failed: {response.status_code} {response.reason}")


def get_request_digest(site_url, access_token):
    """
    Retrieve a request digest (anti-forgery token) for a site.

    Args:
        site_url (str): Absolute URL of the site (the tenant admin site)
        access_token (str): Bearer token for the SharePoint resource

    Returns:
        dict: Context info containing 'FormDigestValue' and 'FormDigestTimeoutSeconds'

    Raises:
        CommandError: If the request fails
        ProtocolError: If the response does not contain a digest
    """
    headers = {
        'Authorization': f'Bearer {access_token}',
        'Accept': 'application/json;odata=nometadata'
    }
    response = make_request(f"{site_url.rstrip('/')}/_api/contextinfo", headers, method='POST', data='')
    _raise_for_status(response, "Retrieving request digest")

    try:
        context_info = response.json()
    except ValueError as e:
        raise ProtocolError(f"Malformed context info response: {e}")

    if not isinstance(context_info, dict):
        raise ProtocolError("Malformed context info response: expected an object")
    for key in ('FormDigestValue', 'FormDigestTimeoutSeconds'):
        if key not in context_info:
            raise ProtocolError(f"Malformed context info response: {key} missing")
    return context_info


def execute_process_query(site_url, access_token, form_digest, body):
    """
    POST a CSOM batch to ProcessQuery.

    Args:
        site_url (str): Absolute URL of the site (the tenant admin site)
        access_token (str): Bearer token for the SharePoint resource
        form_digest (str): Current request digest value
        body (str): CSOM XML request body

    Returns:
        str: Raw response text (a JSON array)

    Raises:
        CommandError: If SharePoint answered with an HTTP error and no CSOM payload
    """
    headers = {
        'Authorization': f'Bearer {access_token}',
        'X-RequestDigest': form_digest,
        'Content-Type': 'text/xml'
    }
    response = make_request(f"{site_url.rstrip('/')}{PROCESS_QUERY_PATH}", headers, method='POST', data=body)

    # CSOM reports most failures as ErrorInfo inside a JSON array, even on 500
    if not response.ok and not response.text.lstrip().startswith('['):
        _raise_for_status(response, "ProcessQuery")
    return response.text
