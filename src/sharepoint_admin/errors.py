# -*- coding: utf-8 -*-
"""
Exception types raised by SharePoint admin commands.

Every failure surfaced to the CLI derives from SharePointAdminError so the
entry point can report it with a single handler and exit non-zero.
"""


class SharePointAdminError(Exception):
    """Base class for all command failures"""


class AuthError(SharePointAdminError):
    """Token acquisition failed upstream (MSAL returned an error)"""


class RemoteOperationError(SharePointAdminError):
    """
    The CSOM service answered with an ErrorInfo record.

    The server's ErrorMessage is kept verbatim as the exception message.
    """

    def __init__(self, message, error_type=None, correlation_id=None):
        super().__init__(message)
        self.error_type = error_type
        self.correlation_id = correlation_id


class ProtocolError(SharePointAdminError):
    """The response body was not valid JSON or not of the expected shape"""


class CommandError(SharePointAdminError):
    """Validation, connection or HTTP failure reported by a command"""
