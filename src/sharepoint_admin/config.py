# -*- coding: utf-8 -*-
"""
Configuration management for SharePoint admin commands.

This module handles command-line argument parsing and configuration setup.
Credentials default to environment variables (a .env file is loaded first)
and can be overridden on the command line.
"""

import argparse
import os

from dotenv import load_dotenv

from .utils import is_valid_sharepoint_url

SITE_CLASSIC_REMOVE = 'site-classic-remove'
SITECLASSIFICATION_ENABLE = 'siteclassification-enable'


def build_parser():
    """
    Build the argument parser for all commands.

    Returns:
        argparse.ArgumentParser: Parser with one subcommand per operation
    """
    parser = argparse.ArgumentParser(
        prog='sharepoint-admin',
        description='Manage SharePoint Online sites and Office 365 site classification'
    )
    parser.add_argument('--tenantId', dest='tenant_id', help='Azure AD tenant ID (env: TENANT_ID)')
    parser.add_argument('--clientId', dest='client_id', help='App registration client ID (env: CLIENT_ID)')
    parser.add_argument('--clientSecret', dest='client_secret', help='App registration client secret (env: CLIENT_SECRET)')
    parser.add_argument('--loginEndpoint', dest='login_endpoint', help='Azure AD endpoint (env: LOGIN_ENDPOINT)')
    parser.add_argument('--graphEndpoint', dest='graph_endpoint', help='Microsoft Graph endpoint (env: GRAPH_ENDPOINT)')
    parser.add_argument('--verbose', action='store_true', help='Print progress messages')
    parser.add_argument('--debug', action='store_true', help='Print requests and raw responses')

    subparsers = parser.add_subparsers(dest='command', metavar='command')
    subparsers.required = True

    remove = subparsers.add_parser(SITE_CLASSIC_REMOVE, help='Removes the specified classic site collection')
    remove.add_argument('-u', '--url', required=True, help='URL of the site to remove')
    recycle = remove.add_mutually_exclusive_group()
    recycle.add_argument('--skipRecycleBin', dest='skip_recycle_bin', action='store_true',
                         help='Remove the site without keeping it in the Recycle Bin')
    recycle.add_argument('--fromRecycleBin', dest='from_recycle_bin', action='store_true',
                         help='Remove the site from the Recycle Bin')
    remove.add_argument('--wait', action='store_true',
                        help='Wait for the site to be removed before completing the command')
    remove.add_argument('--confirm', action='store_true',
                        help="Don't prompt for confirming removing the site")
    remove.add_argument('--adminUrl', dest='admin_url',
                        help='Tenant admin site URL (env: SPO_ADMIN_URL)')

    classification = subparsers.add_parser(SITECLASSIFICATION_ENABLE,
                                           help='Enables site classification configuration')
    classification.add_argument('-c', '--classifications', required=True,
                                help='Comma-separated list of classifications to enable in the tenant')
    classification.add_argument('-d', '--defaultClassification', dest='default_classification', required=True,
                                help='Classification to use by default')
    classification.add_argument('--usageGuidelinesUrl', dest='usage_guidelines_url',
                                help='URL with information shown when choosing the classification of a site')

    return parser


class Config:
    """Configuration for SharePoint admin operations"""

    def __init__(self, args):
        """
        Initialize configuration from parsed arguments and the environment.

        Args:
            args (argparse.Namespace): Result of build_parser().parse_args()
        """
        self.command = args.command

        # Credentials: command line wins over environment
        self.tenant_id = args.tenant_id or os.environ.get('TENANT_ID', '')
        self.client_id = args.client_id or os.environ.get('CLIENT_ID', '')
        self.client_secret = args.client_secret or os.environ.get('CLIENT_SECRET', '')
        self.certificate_path = os.environ.get('CERTIFICATE_PATH', '')
        self.certificate_thumbprint = os.environ.get('CERTIFICATE_THUMBPRINT', '')
        self.login_endpoint = args.login_endpoint or os.environ.get('LOGIN_ENDPOINT') or 'login.microsoftonline.com'
        self.graph_endpoint = args.graph_endpoint or os.environ.get('GRAPH_ENDPOINT') or 'graph.microsoft.com'

        self.verbose = args.verbose
        self.debug = args.debug

        # site-classic-remove
        self.url = getattr(args, 'url', None)
        self.skip_recycle_bin = getattr(args, 'skip_recycle_bin', False)
        self.from_recycle_bin = getattr(args, 'from_recycle_bin', False)
        self.wait = getattr(args, 'wait', False)
        self.confirm = getattr(args, 'confirm', False)
        admin_url = getattr(args, 'admin_url', None) or os.environ.get('SPO_ADMIN_URL', '')
        self.admin_url = admin_url.rstrip('/')

        # siteclassification-enable
        self.classifications = getattr(args, 'classifications', None)
        self.default_classification = getattr(args, 'default_classification', None)
        self.usage_guidelines_url = getattr(args, 'usage_guidelines_url', None)

    def validate(self):
        """
        Validate configuration values.

        Raises:
            ValueError: If configuration is invalid
        """
        if not self.tenant_id:
            raise ValueError("tenant_id cannot be empty")
        if not self.client_id:
            raise ValueError("client_id cannot be empty")
        if not self.client_secret and not self.certificate_path:
            raise ValueError("client_secret or CERTIFICATE_PATH must be set")

        if self.command == SITE_CLASSIC_REMOVE:
            if not self.url:
                raise ValueError("Required parameter url missing")
            if not is_valid_sharepoint_url(self.url):
                raise ValueError(f"{self.url} is not a valid SharePoint Online site URL")
            if not self.admin_url:
                raise ValueError("admin_url cannot be empty (set --adminUrl or SPO_ADMIN_URL)")
            if not is_valid_sharepoint_url(self.admin_url) or '-admin.' not in self.admin_url.lower():
                raise ValueError(f"{self.admin_url} is not a SharePoint Online tenant admin site URL")
            if self.skip_recycle_bin and self.from_recycle_bin:
                raise ValueError("Specify either skipRecycleBin or fromRecycleBin, not both")

        elif self.command == SITECLASSIFICATION_ENABLE:
            if not self.classifications:
                raise ValueError("Required option classifications missing")
            if not self.default_classification:
                raise ValueError("Required option defaultClassification missing")


def parse_config(argv=None):
    """
    Parse configuration from command-line arguments.

    Args:
        argv (list): Arguments to parse (defaults to sys.argv[1:])

    Returns:
        Config: Configured Config object

    Raises:
        ValueError: If configuration is invalid
        SystemExit: If arguments cannot be parsed (argparse usage error)
    """
    load_dotenv()
    args = build_parser().parse_args(argv)
    config = Config(args)
    config.validate()
    return config
