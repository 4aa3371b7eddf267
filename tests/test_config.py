import pytest

from sharepoint_admin.config import parse_config

from conftest import ADMIN_URL, SITE_URL


@pytest.fixture(autouse=True)
def credentials(monkeypatch):
    monkeypatch.setenv("TENANT_ID", "11111111-1111-1111-1111-111111111111")
    monkeypatch.setenv("CLIENT_ID", "22222222-2222-2222-2222-222222222222")
    monkeypatch.setenv("CLIENT_SECRET", "secret")
    monkeypatch.setenv("SPO_ADMIN_URL", ADMIN_URL + "/")
    for name in ("CERTIFICATE_PATH", "CERTIFICATE_THUMBPRINT", "LOGIN_ENDPOINT", "GRAPH_ENDPOINT"):
        monkeypatch.delenv(name, raising=False)


def test_site_remove_options():
    config = parse_config(["--verbose", "site-classic-remove", "--url", SITE_URL, "--skipRecycleBin", "--wait", "--confirm"])

    assert config.command == "site-classic-remove"
    assert config.url == SITE_URL
    assert config.skip_recycle_bin is True
    assert config.from_recycle_bin is False
    assert config.wait is True
    assert config.confirm is True
    assert config.verbose is True
    assert config.admin_url == ADMIN_URL
    assert config.login_endpoint == "login.microsoftonline.com"


def test_command_line_overrides_environment():
    config = parse_config(["--clientId", "cli-client", "--graphEndpoint", "graph.microsoft.us",
                           "siteclassification-enable", "-c", "HBI,LBI", "-d", "LBI"])

    assert config.client_id == "cli-client"
    assert config.graph_endpoint == "graph.microsoft.us"
    assert config.classifications == "HBI,LBI"
    assert config.default_classification == "LBI"
    assert config.usage_guidelines_url is None


def test_recycle_bin_options_are_exclusive():
    with pytest.raises(SystemExit):
        parse_config(["site-classic-remove", "--url", SITE_URL, "--skipRecycleBin", "--fromRecycleBin"])


def test_url_is_required():
    with pytest.raises(SystemExit):
        parse_config(["site-classic-remove"])


@pytest.mark.parametrize("url", ["http://contoso.sharepoint.com/sites/x", "https://contoso.com/sites/x", "project-x"])
def test_invalid_site_url_rejected(url):
    with pytest.raises(ValueError, match="not a valid SharePoint Online site URL"):
        parse_config(["site-classic-remove", "--url", url])


def test_admin_url_must_be_admin_site(monkeypatch):
    monkeypatch.setenv("SPO_ADMIN_URL", "https://contoso.sharepoint.com")
    with pytest.raises(ValueError, match="tenant admin site"):
        parse_config(["site-classic-remove", "--url", SITE_URL])


def test_missing_credentials_rejected(monkeypatch):
    monkeypatch.delenv("CLIENT_SECRET")
    with pytest.raises(ValueError, match="client_secret"):
        parse_config(["site-classic-remove", "--url", SITE_URL])


def test_certificate_replaces_secret(monkeypatch):
    monkeypatch.delenv("CLIENT_SECRET")
    monkeypatch.setenv("CERTIFICATE_PATH", "/tmp/app.pem")
    monkeypatch.setenv("CERTIFICATE_THUMBPRINT", "ABCDEF")

    config = parse_config(["site-classic-remove", "--url", SITE_URL])

    assert config.certificate_path == "/tmp/app.pem"
