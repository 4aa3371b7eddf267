# -*- coding: utf-8 -*-
"""
Microsoft authentication module for SharePoint admin commands.

This module handles Azure AD authentication using MSAL (Microsoft Authentication Library)
and keeps the resulting access token per service (SharePoint Online or Microsoft Graph).
"""

import msal

from .errors import AuthError, CommandError
from .utils import is_debug_enabled


def _load_client_credential(client_secret, certificate_path, certificate_thumbprint):
    """
    Build the MSAL client credential from a secret or a PEM certificate.

    SharePoint Online rejects app-only tokens obtained with a client secret,
    so a certificate is preferred whenever one is configured.
    """
    if certificate_path:
        if not certificate_thumbprint:
            raise AuthError("CERTIFICATE_THUMBPRINT is required when CERTIFICATE_PATH is set")
        with open(certificate_path, 'r', encoding='utf-8') as cert_file:
            private_key = cert_file.read()
        return {'private_key': private_key, 'thumbprint': certificate_thumbprint}
    if not client_secret:
        raise AuthError("Either CLIENT_SECRET or CERTIFICATE_PATH must be configured")
    return client_secret


def acquire_token(tenant_id, client_id, resource, login_endpoint,
                  client_secret=None, certificate_path=None, certificate_thumbprint=None):
    """
    Acquire an authentication token from Azure Active Directory using MSAL.

    This function handles the OAuth 2.0 client credentials flow, which is used
    for service-to-service authentication (no user interaction required).

    Args:
        tenant_id (str): Azure AD tenant ID (GUID format)
        client_id (str): Application (client) ID from Azure AD app registration
        resource (str): Resource root the token is for
                        (e.g. 'https://contoso.sharepoint.com' or 'https://graph.microsoft.com')
        login_endpoint (str): Azure AD authentication endpoint (e.g., 'login.microsoftonline.com')
        client_secret (str): Client secret value from Azure AD app registration
        certificate_path (str): Path to a PEM private key registered on the app
        certificate_thumbprint (str): Thumbprint of the registered certificate

    Returns:
        dict: Token dictionary containing 'access_token', 'token_type' and 'expires_in'

    Raises:
        AuthError: If authentication fails (wrong credentials, consent missing, etc.)
    """
    authority_url = f'https://{login_endpoint}/{tenant_id}'
    credential = _load_client_credential(client_secret, certificate_path, certificate_thumbprint)

    app = msal.ConfidentialClientApplication(
        client_id,
        authority=authority_url,
        client_credential=credential
    )

    # '/.default' scope means "use all permissions granted to this app"
    token = app.acquire_token_for_client(scopes=[f"{resource.rstrip('/')}/.default"])

    # MSAL returns errors in the token dict, not as exceptions
    if "access_token" not in token:
        error_msg = token.get("error", "unknown_error")
        error_desc = token.get("error_description", "No description provided")
        error_codes = token.get("error_codes", [])

        print("[!] ========================================")
        print("[!] AUTHENTICATION FAILED")
        print("[!] ========================================")

        if "invalid_client" in error_msg or 7000215 in error_codes:
            print("[!] Error: Invalid client credentials")
            print("[!] Troubleshooting steps:")
            print("[!]   1. Verify CLIENT_ID and TENANT_ID")
            print("[!]   2. Check if the client secret or certificate has expired")
        elif "unauthorized_client" in error_msg or 700016 in error_codes:
            print("[!] Error: Application not authorized")
            print("[!] Troubleshooting steps:")
            print("[!]   1. Verify the app has Sites.FullControl.All (SharePoint) or")
            print("[!]      Directory.ReadWrite.All (Microsoft Graph) application permissions")
            print("[!]   2. Click 'Grant admin consent' in the Azure AD portal")
        elif "invalid_scope" in error_msg or "AADSTS70011" in error_desc:
            print(f"[!] Error: Invalid scope requested for resource {resource}")
        else:
            print(f"[!] Error: {error_msg}")
            if error_codes:
                print(f"[!] Error codes: {error_codes}")
        print(f"[!] Technical details: {error_desc}")
        print("[!] ========================================")
        raise AuthError(error_desc)

    return token


class ServiceAuth:
    """
    Access token holder for one service.

    Attributes:
        resource (str): Resource root the token is issued for
        access_token (str): Bearer token, None until connected
    """

    def __init__(self, resource, access_token=None):
        self.resource = resource.rstrip('/')
        self.access_token = access_token

    @property
    def connected(self):
        return bool(self.access_token)

    def connect(self, config):
        """
        Acquire a token for this service using the configured app registration.

        Args:
            config (Config): Parsed configuration with tenant and credential settings

        Returns:
            str: The access token
        """
        if is_debug_enabled():
            print(f"[DEBUG] Acquiring access token for {self.resource}...")
        token = acquire_token(
            config.tenant_id,
            config.client_id,
            self.resource,
            config.login_endpoint,
            client_secret=config.client_secret,
            certificate_path=config.certificate_path,
            certificate_thumbprint=config.certificate_thumbprint
        )
        self.access_token = token['access_token']
        return self.access_token

    def ensure_connected(self, message):
        """Raise CommandError with the given message if no token is available"""
        if not self.connected:
            raise CommandError(message)
        return self.access_token


def get_spo_resource(admin_url):
    """
    Derive the SharePoint Online resource root from a tenant admin site URL.

    Args:
        admin_url (str): e.g. 'https://contoso-admin.sharepoint.com'

    Returns:
        str: e.g. 'https://contoso.sharepoint.com'
    """
    scheme, _, rest = admin_url.partition('://')
    host = rest.split('/', 1)[0]
    tenant, _, domain = host.partition('.')
    if tenant.endswith('-admin'):
        tenant = tenant[:-len('-admin')]
    return f"{scheme}://{tenant}.{domain}"
