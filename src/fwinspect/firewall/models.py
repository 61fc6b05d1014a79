"""
Firewall data models.

Typed view of a Compute Engine firewall resource. Optional collections
keep three states: None (never returned by the API), [] (returned
empty) and populated.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import json
import re
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any


class Direction(str, Enum):
    """Traffic direction of a firewall rule."""

    INGRESS = "INGRESS"
    EGRESS = "EGRESS"


class Protocol(str, Enum):
    """Protocols commonly seen in allowed entries."""

    TCP = "tcp"
    UDP = "udp"
    ICMP = "icmp"
    ESP = "esp"
    AH = "ah"
    SCTP = "sctp"
    IPIP = "ipip"
    ALL = "all"


@dataclass
class ProtocolPorts:
    """One allowed (or denied) entry: a protocol and its port tokens."""

    protocol: str | None = None
    ports: list[str] | None = None  # None for portless protocols like icmp

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ProtocolPorts":
        if not isinstance(data, dict):
            raise ValueError(f"Expected a protocol entry object, got {data!r}")

        protocol = data.get("IPProtocol", data.get("ipProtocol"))
        ports = data.get("ports")
        if ports is not None and not isinstance(ports, list):
            raise ValueError(f"Expected a list of ports, got {ports!r}")
        return cls(
            protocol=protocol,
            ports=[str(p) for p in ports] if ports is not None else None,
        )

    def __str__(self) -> str:
        if not self.ports:
            return self.protocol or "?"
        return f"{self.protocol}:{','.join(self.ports)}"


# Upstream camelCase key -> FirewallRule field
_API_FIELDS = {
    "id": "id",
    "name": "name",
    "description": "description",
    "network": "network",
    "priority": "priority",
    "direction": "direction",
    "disabled": "disabled",
    "allowed": "allowed",
    "denied": "denied",
    "sourceTags": "source_tags",
    "targetTags": "target_tags",
    "sourceRanges": "source_ranges",
    "destinationRanges": "destination_ranges",
    "sourceServiceAccounts": "source_service_accounts",
    "targetServiceAccounts": "target_service_accounts",
    "logConfig": "log_config",
    "creationTimestamp": "creation_timestamp",
    "selfLink": "self_link",
}

_STRING_LIST_FIELDS = (
    "source_tags",
    "target_tags",
    "source_ranges",
    "destination_ranges",
    "source_service_accounts",
    "target_service_accounts",
)


def _snake_case(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def _require_list(name: str, value: Any) -> None:
    if not isinstance(value, list):
        raise ValueError(f"Expected a list for {name}, got {type(value).__name__}")


@dataclass
class FirewallRule:
    """Compute Engine firewall rule as returned by the API."""

    name: str | None = None
    id: str | None = None
    description: str | None = None
    network: str | None = None
    priority: int | None = None

    # Raw direction string; unrecognized values are kept as-is
    direction: str | None = None
    disabled: bool | None = None

    allowed: list[ProtocolPorts] | None = None
    denied: list[ProtocolPorts] | None = None

    source_tags: list[str] | None = None
    target_tags: list[str] | None = None
    source_ranges: list[str] | None = None
    destination_ranges: list[str] | None = None
    source_service_accounts: list[str] | None = None
    target_service_accounts: list[str] | None = None

    log_config: dict[str, Any] | None = None
    creation_timestamp: str | None = None
    self_link: str | None = None

    # Upstream keys without a typed field
    attributes: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "FirewallRule":
        """Build a rule from a Compute Engine firewall resource."""
        if not isinstance(data, dict):
            raise ValueError(f"Expected a firewall resource object, got {type(data).__name__}")

        values: dict[str, Any] = {}
        attributes: dict[str, Any] = {}
        for key, value in data.items():
            name = _API_FIELDS.get(key)
            if name is None:
                attributes[key] = value
            else:
                values[name] = value

        for name in ("allowed", "denied"):
            if values.get(name) is not None:
                _require_list(name, values[name])
                values[name] = [ProtocolPorts.from_api(entry) for entry in values[name]]

        for name in _STRING_LIST_FIELDS:
            if values.get(name) is not None:
                _require_list(name, values[name])
                values[name] = [str(item) for item in values[name]]

        if values.get("id") is not None:
            values["id"] = str(values["id"])

        return cls(attributes=attributes, **values)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "FirewallRule":
        """Load a rule from `gcloud compute firewall-rules describe --format=json` output."""
        data = json.loads(Path(path).read_text())
        return cls.from_api(data)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up any property by upstream camelCase key or snake_case name."""
        name = _API_FIELDS.get(key, key)
        if name in self._field_names() and name != "attributes":
            value = getattr(self, name)
            return default if value is None else value

        if key in self.attributes:
            return self.attributes[key]

        # snake_case lookup of a pass-through key
        for attr_key, value in self.attributes.items():
            if _snake_case(attr_key) == key:
                return value

        return default

    @classmethod
    def _field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}

    def is_ingress(self) -> bool:
        return self.direction == Direction.INGRESS

    def allowed_summary(self) -> list[str]:
        """Allowed entries in console shorthand, e.g. ["tcp:80,443", "icmp"]."""
        return [str(entry) for entry in self.allowed or []]
