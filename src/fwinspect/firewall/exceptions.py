"""
Errors raised while evaluating firewall rules.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""


class FirewallCheckError(Exception):
    """Base class for firewall evaluation errors."""


class MissingPropertyError(FirewallCheckError):
    """A check needs a property the loaded rule never supplied."""

    def __init__(self, property_name: str):
        self.property_name = property_name
        super().__init__(
            f"google_compute_firewall is missing expected property '{property_name}'"
        )


class MalformedRangeSpecError(FirewallCheckError):
    """A port range token could not be parsed into integer bounds."""

    def __init__(self, spec: str):
        self.spec = spec
        super().__init__(
            f"google_compute_firewall unexpected port range specified: '{spec}'"
        )
