# -*- coding: utf-8 -*-
"""
HTTP transport shared by the Graph and SharePoint CSOM calls.

Requests are sent exactly once: commands surface every failure to the
user instead of retrying. Transport level exceptions from requests are
translated into CommandError with troubleshooting output.
"""

import requests

from .errors import CommandError
from .utils import get_request_headers, is_debug_enabled, redact_headers

# Seconds to wait for a response before giving up on a single call
REQUEST_TIMEOUT = 60


def make_request(url, headers, method='GET', json_data=None, data=None, params=None):
    """
    Send a single HTTP request.

    Args:
        url (str): Absolute endpoint URL
        headers (dict): Request headers including Authorization
        method (str): HTTP method ('GET', 'POST', 'PATCH', 'DELETE')
        json_data (dict): JSON body (mutually exclusive with data)
        data (str|bytes): Raw body, e.g. CSOM XML (mutually exclusive with json_data)
        params (dict): URL parameters for GET requests

    Returns:
        requests.Response: The HTTP response object, whatever its status code

    Raises:
        CommandError: If the request could not be completed
    """
    headers = get_request_headers(headers)
    method = method.upper()

    if is_debug_enabled():
        print(f"[DEBUG] Executing web request: {method} {url}")
        print(f"[DEBUG] Headers: {redact_headers(headers)}")
        if data is not None:
            print(f"[DEBUG] Body: {data[:500]}")
        elif json_data is not None:
            print(f"[DEBUG] Body: {json_data}")

    try:
        if method == 'GET':
            response = requests.get(url, headers=headers, params=params, timeout=REQUEST_TIMEOUT)
        elif method == 'POST':
            if data is not None:
                response = requests.post(url, headers=headers, data=data, timeout=REQUEST_TIMEOUT)
            else:
                response = requests.post(url, headers=headers, json=json_data, timeout=REQUEST_TIMEOUT)
        elif method == 'PATCH':
            response = requests.patch(url, headers=headers, json=json_data, timeout=REQUEST_TIMEOUT)
        elif method == 'DELETE':
            response = requests.delete(url, headers=headers, timeout=REQUEST_TIMEOUT)
        else:
            raise ValueError(f"Unsupported HTTP method: {method}")

    except requests.exceptions.Timeout as e:
        print("[!] ========================================")
        print("[!] REQUEST TIMEOUT")
        print("[!] ========================================")
        print(f"[!] No response within {REQUEST_TIMEOUT} seconds.")
        print("[!] Check network connectivity and the Microsoft 365 service health page.")
        print(f"[!] URL: {url[:100]}")
        raise CommandError(f"Request timed out: {str(e)[:200]}")

    except requests.exceptions.SSLError as e:
        print("[!] ========================================")
        print("[!] SSL/TLS CERTIFICATE ERROR")
        print("[!] ========================================")
        print("[!] Troubleshooting steps:")
        print("[!]   1. Verify system certificate store is up to date")
        print("[!]   2. Check if a corporate proxy is intercepting TLS connections")
        print("[!]   3. Ensure system clock is accurate")
        raise CommandError(f"SSL certificate verification failed: {str(e)[:200]}")

    except requests.exceptions.ProxyError as e:
        print("[!] ========================================")
        print("[!] PROXY CONNECTION ERROR")
        print("[!] ========================================")
        print("[!] Verify HTTP_PROXY and HTTPS_PROXY environment variables.")
        raise CommandError(f"Proxy connection failed: {str(e)[:200]}")

    except requests.exceptions.ConnectionError as e:
        print("[!] ========================================")
        print("[!] NETWORK CONNECTION FAILED")
        print("[!] ========================================")
        print("[!] Troubleshooting steps:")
        print("[!]   1. Verify internet connectivity and DNS resolution")
        print("[!]   2. Ensure firewall allows HTTPS (port 443) to *.sharepoint.com and *.microsoft.com")
        raise CommandError(f"Network connection failed: {str(e)[:200]}")

    except requests.exceptions.RequestException as e:
        raise CommandError(f"HTTP request error: {str(e)[:200]}")

    if is_debug_enabled():
        print(f"[DEBUG] Response ({response.status_code}): {response.text[:500]}")

    return response
