# -*- coding: utf-8 -*-
"""
SharePoint Admin Package
========================

This package provides command-line operations against Microsoft Graph and
SharePoint Online: enabling tenant site classification and removing classic
site collections, including recycle bin handling and waiting for the
asynchronous removal operation to complete.

Modules:
--------
- config: Configuration and argument parsing
- auth: Microsoft authentication
- transport: Single-shot HTTP requests with error translation
- spo_client: SharePoint context info and CSOM ProcessQuery calls
- csom: CSOM request builder and response interpreter
- digest: Request digest caching
- poller: Long-running operation poller
- site_remove: Classic site removal command
- graph_api: Site classification through Microsoft Graph
- errors: Exception types
- utils: Shared utility functions

Usage Example:
-------------
    from sharepoint_admin.config import parse_config
    from sharepoint_admin.auth import ServiceAuth, get_spo_resource
    from sharepoint_admin.site_remove import remove_classic_site

    cfg = parse_config(['site-classic-remove', '--url', url, '--confirm', '--wait'])
    spo_auth = ServiceAuth(get_spo_resource(cfg.admin_url))
    spo_auth.connect(cfg)
    remove_classic_site(cfg, spo_auth)
"""

__version__ = "1.0.0"

# Main exports for convenience
from .config import parse_config, Config
from .auth import acquire_token, ServiceAuth, get_spo_resource
from .errors import (
    SharePointAdminError,
    AuthError,
    RemoteOperationError,
    ProtocolError,
    CommandError
)
from .csom import (
    OperationKind,
    SpoOperation,
    build_remove_site_request,
    build_operation_status_request,
    parse_client_svc_response
)
from .digest import DigestManager, FormDigest
from .poller import OperationPoller, PollerState, PollerStatus, WaitInterrupted
from .site_remove import remove_classic_site
from .graph_api import enable_site_classification

__all__ = [
    # Configuration
    'parse_config',
    'Config',
    # Authentication
    'acquire_token',
    'ServiceAuth',
    'get_spo_resource',
    # Errors
    'SharePointAdminError',
    'AuthError',
    'RemoteOperationError',
    'ProtocolError',
    'CommandError',
    # CSOM
    'OperationKind',
    'SpoOperation',
    'build_remove_site_request',
    'build_operation_status_request',
    'parse_client_svc_response',
    # Polling
    'DigestManager',
    'FormDigest',
    'OperationPoller',
    'PollerState',
    'PollerStatus',
    'WaitInterrupted',
    # Commands
    'remove_classic_site',
    'enable_site_classification',
]
