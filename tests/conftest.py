"""
Pytest configuration and shared fixtures.
"""
import json
import logging

import pytest

from fwinspect.config import APIConfig, set_config
from fwinspect.firewall import FirewallRule, GoogleComputeFirewall
from fwinspect.logging_config import reset_error_stats


# Compute Engine resource for an SSH-from-bastion rule
SSH_INGRESS_RULE = {
    "kind": "compute#firewall",
    "id": "4851203748121953823",
    "creationTimestamp": "2025-03-02T09:12:44.381-08:00",
    "name": "allow-ssh-bastion",
    "description": "SSH from the bastion subnet",
    "network": "https://www.googleapis.com/compute/v1/projects/demo/global/networks/default",
    "priority": 1000,
    "sourceRanges": ["10.0.0.0/8"],
    "sourceTags": ["bastion"],
    "targetTags": ["ssh", "linux"],
    "allowed": [
        {"IPProtocol": "tcp", "ports": ["22"]},
        {"IPProtocol": "icmp"},
    ],
    "direction": "INGRESS",
    "logConfig": {"enable": False},
    "disabled": False,
    "selfLink": "https://www.googleapis.com/compute/v1/projects/demo/global/firewalls/allow-ssh-bastion",
}

EGRESS_RULE = {
    "name": "allow-egress-dns",
    "direction": "EGRESS",
    "destinationRanges": ["8.8.8.8/32", "8.8.4.4/32"],
    "allowed": [
        {"IPProtocol": "udp", "ports": ["53"]},
        {"IPProtocol": "tcp", "ports": ["53", "4000-5000"]},
    ],
}


@pytest.fixture(autouse=True)
def isolated_config():
    """Keep tests independent of the developer's environment."""
    set_config(APIConfig(
        gcp_access_token="",
        gcp_project="demo",
        compute_api_url="https://compute.test/compute/v1",
    ))
    reset_error_stats()
    yield
    set_config(None)
    logging.getLogger("fwinspect").handlers.clear()


@pytest.fixture
def ssh_rule_data():
    return json.loads(json.dumps(SSH_INGRESS_RULE))


@pytest.fixture
def egress_rule_data():
    return json.loads(json.dumps(EGRESS_RULE))


@pytest.fixture
def make_firewall():
    """Build a GoogleComputeFirewall from a raw API payload."""
    def _make(data, name=None):
        rule = FirewallRule.from_api(data)
        return GoogleComputeFirewall.from_rule(rule, project="demo", name=name)
    return _make


@pytest.fixture
def rule_file(tmp_path, ssh_rule_data):
    path = tmp_path / "allow-ssh-bastion.json"
    path.write_text(json.dumps(ssh_rule_data))
    return path
