# -*- coding: utf-8 -*-
"""
SharePoint client-side object model (CSOM) payloads.

CSOM calls POST an XML batch of object-path actions to
/_vti_bin/client.svc/ProcessQuery and receive a JSON array back:

    [
        {"SchemaVersion": "15.0.0.0", "ErrorInfo": null, ...},
        55, {"IsNull": false},
        ...
        59, {"_ObjectIdentity_": "...", "IsComplete": false, "PollingInterval": 15000}
    ]

This module builds the request bodies for site removal and operation status
checks, and interprets the response array.
"""

import enum
import json

from . import __version__
from .errors import ProtocolError, RemoteOperationError
from .utils import escape_xml

SCHEMA_VERSION = '15.0.0.0'
LIBRARY_VERSION = '16.0.0.0'
APPLICATION_NAME = f'SharePoint Admin CLI v{__version__}'

# Microsoft.Online.SharePoint.TenantAdministration.Tenant
TENANT_TYPE_ID = '{268004ae-ef6b-4e9b-8425-127220d84719}'

PROCESS_QUERY_PATH = '/_vti_bin/client.svc/ProcessQuery'

_REQUEST_OPEN = (
    f'<Request AddExpandoFieldTypeSuffix="true" SchemaVersion="{SCHEMA_VERSION}" '
    f'LibraryVersion="{LIBRARY_VERSION}" ApplicationName="{escape_xml(APPLICATION_NAME)}" '
    'xmlns="http://schemas.microsoft.com/sharepoint/clientquery/2009">'
)

_OPERATION_PROPERTIES = (
    '<Query SelectAllProperties="false"><Properties>'
    '<Property Name="IsComplete" ScalarProperty="true" />'
    '<Property Name="PollingInterval" ScalarProperty="true" />'
    '</Properties></Query>'
)


class OperationKind(enum.Enum):
    """Tenant methods that start an asynchronous site removal"""

    REMOVE_SITE = 'RemoveSite'
    REMOVE_DELETED_SITE = 'RemoveDeletedSite'


class SpoOperation:
    """
    Asynchronous tenant operation as reported by one CSOM response.

    Attributes:
        is_complete (bool): Whether the server finished the operation
        polling_interval_ms (int): Server-advised delay before the next check
        object_identity (str): Token addressing the operation on the next check
    """

    def __init__(self, is_complete, polling_interval_ms, object_identity):
        self.is_complete = is_complete
        self.polling_interval_ms = polling_interval_ms
        self.object_identity = object_identity

    def __repr__(self):
        return (f"SpoOperation(is_complete={self.is_complete}, "
                f"polling_interval_ms={self.polling_interval_ms}, "
                f"object_identity={self.object_identity!r})")


def build_remove_site_request(kind, url):
    """
    Build the ProcessQuery body that starts removing a site collection.

    Args:
        kind (OperationKind): REMOVE_SITE moves the site to the recycle bin,
                              REMOVE_DELETED_SITE purges it from the recycle bin
        url (str): Absolute URL of the site collection

    Returns:
        str: CSOM XML request body
    """
    kind = OperationKind(kind)
    return (
        f'{_REQUEST_OPEN}<Actions>'
        '<ObjectPath Id="55" ObjectPathId="54" />'
        '<ObjectPath Id="57" ObjectPathId="56" />'
        '<Query Id="58" ObjectPathId="54"><Query SelectAllProperties="true"><Properties /></Query></Query>'
        f'<Query Id="59" ObjectPathId="56">{_OPERATION_PROPERTIES}</Query>'
        '</Actions><ObjectPaths>'
        f'<Constructor Id="54" TypeId="{TENANT_TYPE_ID}" />'
        f'<Method Id="56" ParentId="54" Name="{kind.value}"><Parameters>'
        f'<Parameter Type="String">{escape_xml(url)}</Parameter>'
        '</Parameters></Method>'
        '</ObjectPaths></Request>'
    )


def escape_object_identity(object_identity):
    """
    Escape an operation identity for the Name attribute of an Identity path.

    Identities separate their segments with newlines. Depending on how the
    token was serialized they arrive as real newlines or as a literal
    backslash-n sequence; both become &#xA;.
    """
    return escape_xml(object_identity.replace('\\n', '\n'))


def build_operation_status_request(object_identity):
    """
    Build the ProcessQuery body that reads the state of a pending operation.

    Args:
        object_identity (str): _ObjectIdentity_ from the latest response

    Returns:
        str: CSOM XML request body
    """
    return (
        f'{_REQUEST_OPEN}<Actions>'
        f'<Query Id="188" ObjectPathId="184">{_OPERATION_PROPERTIES}</Query>'
        '</Actions><ObjectPaths>'
        f'<Identity Id="184" Name="{escape_object_identity(object_identity)}" />'
        '</ObjectPaths></Request>'
    )


def parse_client_svc_response(text):
    """
    Interpret one CSOM response body.

    Args:
        text (str): Raw response body

    Returns:
        SpoOperation: The operation described by the last array element

    Raises:
        RemoteOperationError: If the first element carries ErrorInfo
        ProtocolError: If the body is not a JSON array of the expected shape
    """
    try:
        contents = json.loads(text)
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"Malformed CSOM response: {e}")

    if not isinstance(contents, list) or not contents:
        raise ProtocolError("Malformed CSOM response: expected a non-empty JSON array")

    header = contents[0]
    if not isinstance(header, dict):
        raise ProtocolError("Malformed CSOM response: first element is not an object")

    error_info = header.get('ErrorInfo')
    if error_info is not None:
        if isinstance(error_info, dict):
            raise RemoteOperationError(
                error_info.get('ErrorMessage') or 'The server reported an error without a message',
                error_type=error_info.get('ErrorTypeName'),
                correlation_id=header.get('TraceCorrelationId')
            )
        raise RemoteOperationError(str(error_info))

    operation = contents[-1]
    if len(contents) < 2 or not isinstance(operation, dict):
        raise ProtocolError("Malformed CSOM response: operation record missing")

    try:
        is_complete = operation['IsComplete']
        polling_interval = operation['PollingInterval']
        object_identity = operation['_ObjectIdentity_']
    except KeyError as e:
        raise ProtocolError(f"Malformed CSOM response: operation is missing {e}")

    if not isinstance(is_complete, bool) or not isinstance(object_identity, str):
        raise ProtocolError("Malformed CSOM response: unexpected operation field types")
    try:
        polling_interval_ms = int(polling_interval)
    except (TypeError, ValueError):
        raise ProtocolError(f"Malformed CSOM response: invalid PollingInterval {polling_interval!r}")

    return SpoOperation(is_complete, polling_interval_ms, object_identity)
