"""
Tests for the Compute Engine firewall client.
"""
import httpx
import pytest

from fwinspect.config import APIConfig, set_config
from fwinspect.firewall import GoogleComputeFirewall, MissingPropertyError
from fwinspect.logging_config import get_error_stats
from fwinspect.services.compute import ComputeClient


def _client(handler, **kwargs):
    return ComputeClient(transport=httpx.MockTransport(handler), **kwargs)


def test_fetches_firewall(ssh_rule_data):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=ssh_rule_data)

    result = _client(handler).get_firewall("demo", "allow-ssh-bastion")

    assert result.found
    assert result.error is None
    assert result.status_code == 200
    assert result.firewall.name == "allow-ssh-bastion"
    assert seen["url"] == (
        "https://compute.test/compute/v1/projects/demo/global/firewalls/allow-ssh-bastion"
    )
    assert seen["auth"] is None


def test_sends_bearer_token(ssh_rule_data):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=ssh_rule_data)

    _client(handler, access_token="ya29.token").get_firewall("demo", "allow-ssh-bastion")

    assert seen["auth"] == "Bearer ya29.token"


def test_token_from_config(ssh_rule_data):
    set_config(APIConfig(gcp_access_token="from-env", compute_api_url="https://alt.test/v1/"))
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        seen["url"] = str(request.url)
        return httpx.Response(200, json=ssh_rule_data)

    _client(handler).get_firewall("demo", "fw")

    assert seen["auth"] == "Bearer from-env"
    assert seen["url"] == "https://alt.test/v1/projects/demo/global/firewalls/fw"


def test_not_found_is_not_an_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": {"code": 404, "message": "not found"}})

    result = _client(handler).get_firewall("demo", "missing")

    assert not result.found
    assert result.error is None
    assert result.status_code == 404
    assert get_error_stats() == {}


def test_server_error_is_reported():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="backend unavailable")

    result = _client(handler).get_firewall("demo", "fw")

    assert not result.found
    assert result.error.startswith("HTTP 500")
    assert "backend unavailable" in result.error
    assert get_error_stats() == {"firewall_fetch_http": 1}


def test_transport_error_is_reported():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = _client(handler).get_firewall("demo", "fw")

    assert not result.found
    assert "connection refused" in result.error
    assert get_error_stats() == {"firewall_fetch_failed": 1}


def test_invalid_body_is_reported():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>login</html>")

    result = _client(handler).get_firewall("demo", "fw")

    assert not result.found
    assert result.error


def test_client_is_reusable_across_sync_calls(ssh_rule_data):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=ssh_rule_data)

    client = _client(handler)

    assert client.get_firewall("demo", "a").found
    assert client.get_firewall("demo", "b").found


class TestGoogleComputeFirewall:
    def test_loads_on_construction(self, ssh_rule_data):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.path)
            return httpx.Response(200, json=ssh_rule_data)

        fw = GoogleComputeFirewall(project="demo", name="allow-ssh-bastion", client=_client(handler))

        assert fw.exists()
        assert fw.allowed_ssh()
        assert not fw.allowed_http()
        assert fw.allow_ip_ranges(["10.0.0.0/8"])
        assert len(calls) == 1

    def test_missing_rule(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404)

        fw = GoogleComputeFirewall(project="demo", name="gone", client=_client(handler))

        assert not fw.exists()
        assert fw.error is None
        assert str(fw) == "Firewall Rule gone"
        with pytest.raises(MissingPropertyError):
            fw.allowed_ssh()

    def test_fetch_error_is_kept(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, text="permission denied")

        fw = GoogleComputeFirewall(project="demo", name="fw", client=_client(handler))

        assert not fw.exists()
        assert fw.error.startswith("HTTP 403")


@pytest.mark.parametrize("payload", [
    {"name": "fw", "allowed": ["tcp:22"]},
    {"name": "fw", "allowed": {"IPProtocol": "tcp"}},
    {"name": "fw", "allowed": [{"IPProtocol": "tcp", "ports": "22"}]},
    {"name": "fw", "sourceRanges": "0.0.0.0/0"},
])
def test_malformed_rule_is_reported_not_raised(payload):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    fw = GoogleComputeFirewall(project="demo", name="fw", client=_client(handler))

    assert fw.exists() is False
    assert fw.error.startswith("Expected a")
    assert get_error_stats() == {"firewall_fetch_failed": 1}
