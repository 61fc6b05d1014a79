"""
Firewall rule compliance checks.

Provides a typed model of Compute Engine firewall rules and
predicates over their allowed ports, tags and IP ranges.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from fwinspect.firewall.models import (
    FirewallRule,
    ProtocolPorts,
    Direction,
    Protocol,
)
from fwinspect.firewall.exceptions import (
    FirewallCheckError,
    MissingPropertyError,
    MalformedRangeSpecError,
)
from fwinspect.firewall.ports import (
    single_port_matches,
    parse_port_range,
    parse_protocol_ports,
)
from fwinspect.firewall.evaluator import GoogleComputeFirewall, list_matches

__all__ = [
    "FirewallRule",
    "ProtocolPorts",
    "Direction",
    "Protocol",
    "FirewallCheckError",
    "MissingPropertyError",
    "MalformedRangeSpecError",
    "single_port_matches",
    "parse_port_range",
    "parse_protocol_ports",
    "GoogleComputeFirewall",
    "list_matches",
]
