from datetime import datetime, timedelta

import pytest
import requests

from sharepoint_admin.digest import DigestManager
from sharepoint_admin.errors import CommandError, ProtocolError

from conftest import ADMIN_URL, TOKEN, FakeClock, FakeResponse

FETCHED_AT = datetime(2026, 10, 18, 10, 0, 0)


def make_manager(fake_sharepoint, timeout=1800):
    server = fake_sharepoint([], digest_timeout=timeout)
    clock = FakeClock(FETCHED_AT)
    return DigestManager(ADMIN_URL, TOKEN, clock=clock), server, clock


def test_first_call_fetches_digest(fake_sharepoint):
    manager, server, _ = make_manager(fake_sharepoint)

    digest = manager.ensure_digest()

    assert server.digest_calls == 1
    assert digest.value.startswith("0x0001")
    assert digest.expires_at == FETCHED_AT + timedelta(seconds=1795)


def test_digest_reused_before_safety_margin(fake_sharepoint):
    manager, server, clock = make_manager(fake_sharepoint)
    first = manager.ensure_digest()

    clock.now = FETCHED_AT + timedelta(seconds=1794, microseconds=999999)
    second = manager.ensure_digest()

    assert second is first
    assert server.digest_calls == 1


def test_digest_refreshed_at_safety_margin(fake_sharepoint):
    manager, server, clock = make_manager(fake_sharepoint)
    first = manager.ensure_digest()

    clock.now = FETCHED_AT + timedelta(seconds=1795)
    second = manager.ensure_digest()

    assert server.digest_calls == 2
    assert second.value != first.value
    assert second.expires_at == clock.now + timedelta(seconds=1795)


def test_digest_fetch_failure_propagates(monkeypatch):
    calls = []

    def failing_post(url, **kwargs):
        calls.append(url)
        return FakeResponse(status_code=403, reason="Forbidden",
                            body={"odata.error": {"message": {"value": "Access denied."}}})

    monkeypatch.setattr(requests, "post", failing_post)
    manager = DigestManager(ADMIN_URL, TOKEN, clock=FakeClock(FETCHED_AT))

    with pytest.raises(CommandError, match="Access denied."):
        manager.ensure_digest()
    assert manager.digest is None
    assert calls == [f"{ADMIN_URL}/_api/contextinfo"]


def test_digest_response_without_value_is_protocol_error(monkeypatch):
    monkeypatch.setattr(requests, "post", lambda url, **kwargs: FakeResponse(body={"WebFullUrl": ADMIN_URL}))
    manager = DigestManager(ADMIN_URL, TOKEN, clock=FakeClock(FETCHED_AT))

    with pytest.raises(ProtocolError, match="FormDigestValue"):
        manager.ensure_digest()


@pytest.mark.parametrize("timeout", [None, "soon", ""])
def test_digest_response_with_invalid_timeout_is_protocol_error(fake_sharepoint, timeout):
    manager, server, _ = make_manager(fake_sharepoint, timeout=timeout)

    with pytest.raises(ProtocolError, match="FormDigestTimeoutSeconds"):
        manager.ensure_digest()
    assert server.digest_calls == 1
    assert manager.digest is None
