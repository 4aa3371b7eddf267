import json

import pytest
import requests

ADMIN_URL = "https://contoso-admin.sharepoint.com"
SITE_URL = "https://contoso.sharepoint.com/sites/project-x"
TOKEN = "eyJ0eXAiOiJKV1QiLCJhbGciOiJSUzI1NiJ9.token"


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None, reason="OK"):
        self.status_code = status_code
        self.reason = reason
        self.headers = {}
        if text is None:
            text = json.dumps(body) if body is not None else ""
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        return json.loads(self.text)


def csom_response(is_complete, polling_interval=0, identity="abc", error_message=None):
    header = {
        "SchemaVersion": "15.0.0.0",
        "LibraryVersion": "16.0.7324.1200",
        "ErrorInfo": None,
        "TraceCorrelationId": "e5b4b39e-9094-5000-8c2b-6f6b5ec21ab1",
    }
    if error_message is not None:
        header["ErrorInfo"] = {
            "ErrorMessage": error_message,
            "ErrorValue": None,
            "ErrorCode": -2147024809,
            "ErrorTypeName": "System.ArgumentException",
        }
        return json.dumps([header])
    return json.dumps([
        header,
        55, {"IsNull": False},
        57, {"IsNull": False},
        58, {"_ObjectType_": "Microsoft.Online.SharePoint.TenantAdministration.Tenant"},
        59, {
            "_ObjectType_": "Microsoft.Online.SharePoint.TenantAdministration.SpoOperation",
            "_ObjectIdentity_": identity,
            "IsComplete": is_complete,
            "PollingInterval": polling_interval,
        },
    ])


class FakeSharePoint:
    """
    Stand-in for requests.post against a tenant admin site.

    Context info calls return a digest; ProcessQuery calls return the queued
    bodies in order.
    """

    def __init__(self, process_query_responses, digest_timeout=1800):
        self.responses = list(process_query_responses)
        self.digest_timeout = digest_timeout
        self.digest_calls = 0
        self.process_query_calls = []

    def __call__(self, url, headers=None, data=None, json=None, timeout=None):
        if url.endswith("/_api/contextinfo"):
            self.digest_calls += 1
            return FakeResponse(body={
                "FormDigestValue": f"0x{self.digest_calls:04d},18 Oct 2026 10:00:00 -0000",
                "FormDigestTimeoutSeconds": self.digest_timeout,
            })
        if url.endswith("/_vti_bin/client.svc/ProcessQuery"):
            self.process_query_calls.append({"url": url, "headers": headers, "body": data})
            response = self.responses.pop(0)
            if isinstance(response, FakeResponse):
                return response
            return FakeResponse(text=response)
        raise AssertionError(f"unexpected POST {url}")


class RecordingEvent:
    """threading.Event replacement that records wait timeouts instead of sleeping"""

    def __init__(self, on_wait=None):
        self.timeouts = []
        self.on_wait = on_wait
        self._flag = False

    def wait(self, timeout=None):
        self.timeouts.append(timeout)
        if self.on_wait is not None:
            self.on_wait()
        return self._flag

    def set(self):
        self._flag = True

    def clear(self):
        self._flag = False

    def is_set(self):
        return self._flag


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture(autouse=True)
def quiet_env(monkeypatch):
    monkeypatch.delenv("DEBUG", raising=False)
    monkeypatch.delenv("VERBOSE", raising=False)


@pytest.fixture
def fake_sharepoint(monkeypatch):
    def install(responses, digest_timeout=1800):
        server = FakeSharePoint(responses, digest_timeout=digest_timeout)
        monkeypatch.setattr(requests, "post", server)
        return server
    return install
