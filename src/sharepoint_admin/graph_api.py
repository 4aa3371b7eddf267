# -*- coding: utf-8 -*-
"""
Microsoft Graph API operations for site classification.

Site classification is stored in the tenant directory setting created from
the Group.Unified setting template.
"""

from dotenv import load_dotenv

from .errors import CommandError, ProtocolError
from .transport import make_request
from .utils import is_debug_enabled, is_verbose_enabled

# Load environment variables
load_dotenv()

# Directory setting template "Group.Unified"
GROUP_UNIFIED_TEMPLATE_ID = '62375ab9-6b52-47ed-826b-58e47e0e304b'


def _graph_headers(access_token):
    return {
        'Authorization': f'Bearer {access_token}',
        'Accept': 'application/json;odata.metadata=none',
        'Content-Type': 'application/json'
    }


def raise_for_graph_error(response):
    """
    Raise CommandError with the Graph error message for a non-2xx response.

    Graph errors look like {"error": {"code": "...", "message": "..."}}.
    """
    if response.ok:
        return
    message = None
    try:
        message = response.json().get('error', {}).get('message')
    except (ValueError, AttributeError):
        pass
    raise CommandError(message or f"Graph request failed: {response.status_code} {response.reason}")


def get_setting_template(access_token, graph_endpoint, template_id=GROUP_UNIFIED_TEMPLATE_ID):
    """
    Read a directory setting template.

    Args:
        access_token (str): Bearer token for Microsoft Graph
        graph_endpoint (str): Microsoft Graph API endpoint (e.g. 'graph.microsoft.com')
        template_id (str): Directory setting template ID

    Returns:
        dict: Template with 'values' definitions ({'name', 'type', 'defaultValue', ...})
    """
    url = f"https://{graph_endpoint}/beta/directorySettingTemplates/{template_id}"
    response = make_request(url, _graph_headers(access_token), method='GET')
    raise_for_graph_error(response)

    try:
        template = response.json()
    except ValueError as e:
        raise ProtocolError(f"Malformed setting template response: {e}")
    if not isinstance(template, dict) or not isinstance(template.get('values'), list):
        raise ProtocolError("Malformed setting template response: values missing")
    return template


def merge_classification_values(template_values, classifications, default_classification,
                                usage_guidelines_url=None):
    """
    Build the setting value set from template defaults and the classification options.

    Args:
        template_values (list): Value definitions from the setting template
        classifications (str): Comma-separated classification names
        default_classification (str): Classification applied by default
        usage_guidelines_url (str): Optional guidance URL

    Returns:
        list: [{'name': str, 'value': str}, ...] in template order
    """
    overrides = {
        'ClassificationList': classifications,
        'DefaultClassification': default_classification,
        'UsageGuidelinesUrl': usage_guidelines_url or '',
    }

    values = []
    for definition in template_values:
        name = definition.get('name')
        if not name:
            continue
        default = definition.get('defaultValue')
        values.append({
            'name': name,
            'value': overrides.pop(name) if name in overrides else ('' if default is None else default)
        })

    # Templates without a definition for an override still get the value
    for name, value in overrides.items():
        values.append({'name': name, 'value': value})

    return values


def enable_site_classification(graph_auth, graph_endpoint, classifications, default_classification,
                               usage_guidelines_url=None):
    """
    Enable site classification for the tenant.

    Reads the Group.Unified template, merges the classification values into
    its defaults and creates the directory setting.

    Args:
        graph_auth (ServiceAuth): Connected Microsoft Graph auth
        graph_endpoint (str): Microsoft Graph API endpoint
        classifications (str): Comma-separated classification names
        default_classification (str): Classification applied by default
        usage_guidelines_url (str): Optional guidance URL

    Returns:
        dict: The created directory setting as returned by Graph

    Raises:
        CommandError: If not connected or Graph rejected a request
    """
    access_token = graph_auth.ensure_connected("Connect to the Microsoft Graph first")

    template = get_setting_template(access_token, graph_endpoint)
    values = merge_classification_values(
        template['values'], classifications, default_classification, usage_guidelines_url
    )

    if is_verbose_enabled():
        print(f"[*] Enabling site classification: {classifications} (default: {default_classification})")
    if is_debug_enabled():
        print(f"[DEBUG] Setting values: {values}")

    url = f"https://{graph_endpoint}/beta/settings"
    body = {
        'templateId': template.get('id', GROUP_UNIFIED_TEMPLATE_ID),
        'values': values
    }
    response = make_request(url, _graph_headers(access_token), method='POST', json_data=body)
    raise_for_graph_error(response)

    if is_verbose_enabled():
        print("[✓] Site classification enabled")
    try:
        return response.json()
    except ValueError:
        return {}
