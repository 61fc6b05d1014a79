"""
Port specification matching.

A firewall's allowed entry lists ports as string tokens, each either a
single port ("22") or an inclusive range ("4000-5000"). The console
shorthand "tcp:90,91" arrives from the API already split into
protocol "tcp" and ports ["90", "91"].

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import logging
import re

from fwinspect.firewall.exceptions import MalformedRangeSpecError

logger = logging.getLogger(__name__)

PORT_RANGE_SEPARATOR = "-"

_PORT_BOUND = re.compile(r"[0-9]+")


def parse_port_range(rule_port: str) -> tuple[int, int]:
    """Split a range token such as "4000-5000" into (lower, upper)."""
    lower, _, upper = rule_port.partition(PORT_RANGE_SEPARATOR)
    # Plain digits only; int() would also take "+80", " 80" and "1_000"
    if not (_PORT_BOUND.fullmatch(lower) and _PORT_BOUND.fullmatch(upper)):
        raise MalformedRangeSpecError(rule_port)
    return int(lower), int(upper)


def single_port_matches(rule_port: str, port: str) -> bool:
    """Check whether one port token from a rule covers the given port.

    Single ports are compared as strings, so "080" does not match "80".
    Ranges are compared numerically and include both bounds.

    Raises:
        MalformedRangeSpecError: rule_port is a range with a non-integer bound
    """
    if PORT_RANGE_SEPARATOR not in rule_port:
        return rule_port == port

    lower, upper = parse_port_range(rule_port)
    try:
        value = int(port)
    except ValueError:
        logger.debug("Port %r is not numeric, cannot fall in range %s", port, rule_port)
        return False

    return lower <= value <= upper


def parse_protocol_ports(value: str) -> tuple[str, list[str] | None]:
    """Parse "proto[:port[,port...]]" into a protocol and port token list.

    Examples:
        "tcp:80" -> ("tcp", ["80"])
        "tcp:90,91" -> ("tcp", ["90", "91"])
        "udp:3000-4000" -> ("udp", ["3000-4000"])
        "icmp" -> ("icmp", None)
    """
    protocol, sep, port_list = value.strip().partition(":")
    protocol = protocol.strip()
    if not protocol:
        raise ValueError(f"Missing protocol in {value!r}")

    if not sep:
        return protocol, None

    ports = [p.strip() for p in port_list.split(",") if p.strip()]
    return protocol, ports or None
