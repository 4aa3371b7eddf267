#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SharePoint Admin command-line entry point
=========================================

SYNOPSIS:
    python main.py [--tenantId ID] [--clientId ID] [--clientSecret SECRET]
                   [--verbose] [--debug] <command> [options]

COMMANDS:
    site-classic-remove --url <url> [--skipRecycleBin | --fromRecycleBin]
                        [--wait] [--confirm] [--adminUrl <url>]
        Removes a classic site collection. By default the site is moved to
        the Recycle Bin and the command returns as soon as SharePoint has
        accepted the request. --wait keeps running until SharePoint reports
        the operation complete. --skipRecycleBin also purges the site from the
        Recycle Bin. --fromRecycleBin purges a site that is already there.
        Requires a connection to the tenant admin site (SPO_ADMIN_URL).

    siteclassification-enable --classifications <list>
                              --defaultClassification <name>
                              [--usageGuidelinesUrl <url>]
        Enables site classification for Office 365 groups through
        Microsoft Graph (beta).

ENVIRONMENT:
    TENANT_ID, CLIENT_ID, CLIENT_SECRET     App registration (client credentials)
    CERTIFICATE_PATH, CERTIFICATE_THUMBPRINT
                                            Certificate credential (required by
                                            SharePoint for app-only access)
    SPO_ADMIN_URL                           e.g. https://contoso-admin.sharepoint.com
    LOGIN_ENDPOINT, GRAPH_ENDPOINT          Sovereign cloud endpoints
    A .env file in the working directory is loaded automatically.

EXIT CODES:
    0    Success (or removal declined at the prompt)
    1    Configuration, authentication or operation failure
    130  Interrupted
"""

import os
import sys

from sharepoint_admin.auth import ServiceAuth, get_spo_resource
from sharepoint_admin.config import SITE_CLASSIC_REMOVE, SITECLASSIFICATION_ENABLE, parse_config
from sharepoint_admin.errors import SharePointAdminError
from sharepoint_admin.graph_api import enable_site_classification
from sharepoint_admin.poller import PollerStatus
from sharepoint_admin.site_remove import remove_classic_site
from sharepoint_admin.utils import is_debug_enabled


def run_command(config):
    """
    Connect to the service the command needs and run it.

    Args:
        config (Config): Validated configuration

    Returns:
        int: Process exit code
    """
    if config.command == SITE_CLASSIC_REMOVE:
        spo_auth = ServiceAuth(get_spo_resource(config.admin_url))
        spo_auth.connect(config)
        status = remove_classic_site(config, spo_auth)
        return 130 if status == PollerStatus.CANCELLED else 0

    if config.command == SITECLASSIFICATION_ENABLE:
        graph_auth = ServiceAuth(f"https://{config.graph_endpoint}")
        graph_auth.connect(config)
        enable_site_classification(
            graph_auth,
            config.graph_endpoint,
            config.classifications,
            config.default_classification,
            config.usage_guidelines_url
        )
        return 0

    print(f"[!] Unknown command: {config.command}")
    return 1


def main(argv=None):
    """
    Parse arguments, run the selected command and exit with its status.
    """
    try:
        config = parse_config(argv)
    except ValueError as config_error:
        print(f"[!] Invalid configuration: {config_error}")
        sys.exit(1)

    # Set environment variables for debug flags (enables debug checks in utils.py)
    if config.debug:
        os.environ['DEBUG'] = 'true'
    if config.verbose:
        os.environ['VERBOSE'] = 'true'

    try:
        exit_code = run_command(config)
    except SharePointAdminError as e:
        print(f"[!] Error: {e}")
        if is_debug_enabled():
            import traceback
            print(f"[DEBUG] Traceback: {traceback.format_exc()}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n[!] Interrupted")
        sys.exit(130)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
