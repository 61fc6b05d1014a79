"""
Firewall rule compliance checks.

Wraps one Compute Engine firewall rule and answers questions such as
"does this rule allow SSH" or "are the source tags exactly these".

Example:
    fw = GoogleComputeFirewall(project="my-project", name="allow-ssh")
    assert fw.exists()
    assert fw.allowed_ssh()
    assert not fw.allow_ip_ranges(["0.0.0.0/0"])

Missing data policy: a rule without ``allowed`` or ``direction`` cannot
answer port or IP range questions and raises MissingPropertyError.
Missing tags or ranges mean the rule allows nothing and give False.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from fwinspect.firewall.exceptions import MissingPropertyError
from fwinspect.firewall.models import FirewallRule, Protocol
from fwinspect.firewall.ports import single_port_matches

if TYPE_CHECKING:
    from fwinspect.services.compute import ComputeClient

logger = logging.getLogger(__name__)


def list_matches(have: Iterable[Any], want: Iterable[Any], exact: bool = False) -> bool:
    """Compare a rule's list against a wanted list.

    With exact=True both must hold the same elements, in any order.
    Otherwise every wanted element must be present in ``have``; extra
    elements are ignored and an empty ``want`` always matches.
    """
    have = set(have)
    want = set(want)
    if exact:
        return have == want
    return want <= have


class GoogleComputeFirewall:
    """Compliance checks for a single Compute Engine firewall rule."""

    def __init__(self, project: str, name: str, client: "ComputeClient | None" = None):
        if client is None:
            from fwinspect.services.compute import ComputeClient
            client = ComputeClient()

        lookup = client.get_firewall(project, name)
        self._setup(project, name, lookup.firewall, lookup.error)

    @classmethod
    def from_rule(
        cls,
        rule: FirewallRule | None,
        project: str | None = None,
        name: str | None = None,
    ) -> "GoogleComputeFirewall":
        """Wrap an already loaded rule without calling the API."""
        fw = cls.__new__(cls)
        if name is None and rule is not None:
            name = rule.name
        fw._setup(project, name, rule, None)
        return fw

    def _setup(
        self,
        project: str | None,
        name: str | None,
        firewall: FirewallRule | None,
        error: str | None,
    ) -> None:
        self.project = project
        self.display_name = name
        self.error = error
        self._firewall = firewall

    @property
    def rule(self) -> FirewallRule:
        """The loaded rule, or an empty one when nothing was loaded."""
        if self._firewall is None:
            return FirewallRule()
        return self._firewall

    def exists(self) -> bool:
        return self._firewall is not None

    def __str__(self) -> str:
        return f"Firewall Rule {self.display_name}"

    def __repr__(self) -> str:
        return f"<GoogleComputeFirewall project={self.project!r} name={self.display_name!r}>"

    # Well-known services, tcp only

    def allowed_http(self) -> bool:
        return self.port_protocol_allowed("80")

    def allowed_ssh(self) -> bool:
        return self.port_protocol_allowed("22")

    def allowed_https(self) -> bool:
        return self.port_protocol_allowed("443")

    def allowed_rdp(self) -> bool:
        return self.port_protocol_allowed("3389")

    def allow_port_protocol(self, port: str, protocol: str) -> bool:
        return self.port_protocol_allowed(port, protocol)

    def port_protocol_allowed(self, single_port: str, protocol: str = Protocol.TCP) -> bool:
        """Check whether any allowed entry for ``protocol`` covers ``single_port``.

        ``single_port`` must be one port, not a range. Entries are scanned
        in order; the first covering port token wins.

        Raises:
            MissingPropertyError: the rule has no ``allowed`` property
            MalformedRangeSpecError: a matching entry has an unparsable range
        """
        allowed = self.rule.allowed
        if allowed is None:
            raise MissingPropertyError("allowed")

        single_port = str(single_port)
        candidates = [
            entry for entry in allowed
            if entry.protocol is not None and entry.protocol == protocol
        ]

        # "tcp:80" -> ["80"], "tcp:90,91" -> ["90", "91"], "udp:3000-4000" -> ["3000-4000"]
        for entry in candidates:
            if entry.ports is None:
                continue
            for rule_port in entry.ports:
                if single_port_matches(rule_port, single_port):
                    logger.debug("%s allows %s/%s via %s", self, single_port, protocol, rule_port)
                    return True

        return False

    # Tags: an unset tag list allows nothing

    def allow_source_tags(self, tag_list: Iterable[str]) -> bool:
        return self._match_tags(self.rule.source_tags, tag_list)

    def allow_target_tags(self, tag_list: Iterable[str]) -> bool:
        return self._match_tags(self.rule.target_tags, tag_list)

    def allow_source_tags_only(self, tag_list: Iterable[str]) -> bool:
        return self._match_tags(self.rule.source_tags, tag_list, exact=True)

    def allow_target_tags_only(self, tag_list: Iterable[str]) -> bool:
        return self._match_tags(self.rule.target_tags, tag_list, exact=True)

    def _match_tags(self, tags: list[str] | None, tag_list: Iterable[str], exact: bool = False) -> bool:
        if tags is None:
            return False
        return list_matches(tags, tag_list, exact)

    # IP ranges: direction picks the field

    def allow_ip_ranges(self, ip_range_list: Iterable[str]) -> bool:
        return self.allow_ip_range_list(ip_range_list)

    def allow_ip_ranges_only(self, ip_range_list: Iterable[str]) -> bool:
        return self.allow_ip_range_list(ip_range_list, exact=True)

    def allow_ip_range_list(self, ip_range_list: Iterable[str], exact: bool = False) -> bool:
        """Match IP ranges against source ranges (ingress) or destination ranges.

        Any direction other than INGRESS, including unknown values, is
        checked against destination ranges.

        Raises:
            MissingPropertyError: the rule has no ``direction`` property
        """
        rule = self.rule
        if rule.direction is None:
            raise MissingPropertyError("direction")

        if rule.is_ingress():
            ranges = rule.source_ranges
        else:
            ranges = rule.destination_ranges

        if ranges is None:
            return False
        return list_matches(ranges, ip_range_list, exact)

    # Natural-language aliases
    allows_http = allowed_http
    allows_ssh = allowed_ssh
    allows_https = allowed_https
    allows_rdp = allowed_rdp
    allows_port_protocol = allow_port_protocol
    allows_source_tags = allow_source_tags
    allows_target_tags = allow_target_tags
    allows_source_tags_only = allow_source_tags_only
    allows_target_tags_only = allow_target_tags_only
    allows_ip_ranges = allow_ip_ranges
    allows_ip_ranges_only = allow_ip_ranges_only
