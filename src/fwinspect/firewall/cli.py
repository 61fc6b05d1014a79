"""
Firewall CLI commands.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import json
import logging
from collections.abc import Callable
from dataclasses import asdict

import click
from netaddr import AddrFormatError, IPNetwork
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from fwinspect.config import get_config
from fwinspect.firewall.evaluator import GoogleComputeFirewall
from fwinspect.firewall.exceptions import FirewallCheckError
from fwinspect.firewall.models import FirewallRule, Protocol
from fwinspect.firewall.ports import parse_protocol_ports

console = Console()
logger = logging.getLogger(__name__)


def _split_list(ctx, param, value: str | None) -> list[str] | None:
    """Split a comma separated option value."""
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def _validate_ip_ranges(ctx, param, value: str | None) -> list[str] | None:
    """Split and validate a comma separated CIDR list.

    The strings are kept as typed; rules compare ranges textually.
    """
    ranges = _split_list(ctx, param, value)
    if ranges is None:
        return None
    for cidr in ranges:
        try:
            IPNetwork(cidr)
        except (AddrFormatError, ValueError):
            raise click.BadParameter(f"'{cidr}' is not a valid IP range")
    return ranges


def _validate_port_protocols(ctx, param, value: tuple[str, ...]) -> list[tuple[str, list[str]]]:
    """Parse PROTO:PORT[,PORT] values into (protocol, ports)."""
    parsed = []
    for item in value:
        try:
            protocol, ports = parse_protocol_ports(item)
        except ValueError as e:
            raise click.BadParameter(str(e))
        if not ports:
            raise click.BadParameter(f"'{item}' names no port, use PROTO:PORT")
        parsed.append((protocol, ports))
    return parsed


def firewall_source_options(func: Callable) -> Callable:
    """Options selecting the rule to load."""
    func = click.option(
        "--file", "-f", "rule_file",
        type=click.Path(exists=True, dir_okay=False),
        help="Read the rule from a JSON file (gcloud ... describe --format=json)",
    )(func)
    func = click.option("--name", "-n", help="Firewall rule name")(func)
    func = click.option(
        "--project", "-p",
        help="Google Cloud project (defaults to GOOGLE_CLOUD_PROJECT)",
    )(func)
    return func


def _load_firewall(project: str | None, name: str | None, rule_file: str | None) -> GoogleComputeFirewall:
    if rule_file:
        try:
            rule = FirewallRule.from_json_file(rule_file)
        except ValueError as e:
            console.print(f"[red]Error:[/red] Could not read {rule_file}: {e}")
            raise SystemExit(2)
        return GoogleComputeFirewall.from_rule(rule, project=project, name=name or rule.name)

    project = project or get_config().gcp_project
    if not project or not name:
        console.print("[red]Error:[/red] Provide --file, or --name with --project")
        raise SystemExit(2)

    with console.status(f"[cyan]Fetching firewall {name}...[/cyan]"):
        fw = GoogleComputeFirewall(project=project, name=name)

    if fw.error:
        console.print(f"[red]Error:[/red] {fw.error}")
        raise SystemExit(2)
    if not fw.exists():
        console.print(f"[red]{fw} not found in project {project}[/red]")
        raise SystemExit(2)
    return fw


@click.group()
def firewall():
    """Firewall rule compliance checks.

    Load a Compute Engine firewall rule from the API or from a JSON
    export and check which ports, tags and IP ranges it allows.
    """
    pass


@firewall.command("show")
@firewall_source_options
@click.option("--json", "-j", "output_json", is_flag=True, help="Output as JSON")
def show_rule(project: str | None, name: str | None, rule_file: str | None, output_json: bool):
    """Show the properties of a firewall rule.

    Examples:
        fwinspect firewall show -p my-project -n allow-ssh
        fwinspect firewall show -f allow-ssh.json --json
    """
    fw = _load_firewall(project, name, rule_file)
    rule = fw.rule

    if output_json:
        click.echo(json.dumps(asdict(rule), indent=2, default=str))
        return

    table = Table(title=str(fw), show_header=False, box=None)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Name", rule.name or "-")
    table.add_row("Network", rule.network or "-")
    table.add_row("Direction", rule.direction or "[dim]unset[/dim]")
    table.add_row("Priority", str(rule.priority) if rule.priority is not None else "-")
    table.add_row("Disabled", str(rule.disabled) if rule.disabled is not None else "-")
    table.add_row("Allowed", _format_list(rule.allowed_summary() if rule.allowed is not None else None))
    if rule.denied is not None:
        table.add_row("Denied", _format_list([str(entry) for entry in rule.denied]))
    table.add_row("Source Tags", _format_list(rule.source_tags))
    table.add_row("Target Tags", _format_list(rule.target_tags))
    table.add_row("Source Ranges", _format_list(rule.source_ranges))
    table.add_row("Destination Ranges", _format_list(rule.destination_ranges))
    if rule.description:
        table.add_row("Description", rule.description)

    console.print(table)


def _format_list(values: list[str] | None) -> str:
    if values is None:
        return "[dim]unset[/dim]"
    if not values:
        return "[dim]empty[/dim]"
    return ", ".join(values)


@firewall.command("check")
@firewall_source_options
@click.option("--http", "check_http", is_flag=True, help="Check tcp/80")
@click.option("--ssh", "check_ssh", is_flag=True, help="Check tcp/22")
@click.option("--https", "check_https", is_flag=True, help="Check tcp/443")
@click.option("--rdp", "check_rdp", is_flag=True, help="Check tcp/3389")
@click.option(
    "--port", "port_protocols", multiple=True, callback=_validate_port_protocols,
    help="Check PROTO:PORT[,PORT], e.g. udp:53 (repeatable)",
)
@click.option("--source-tags", callback=_split_list, help="Comma separated source tags")
@click.option("--target-tags", callback=_split_list, help="Comma separated target tags")
@click.option("--ip-ranges", callback=_validate_ip_ranges, help="Comma separated CIDRs")
@click.option("--only", is_flag=True, help="Tags and IP ranges must match exactly")
@click.option("--deny", is_flag=True, help="Expect every check to be denied")
@click.option("--json", "-j", "output_json", is_flag=True, help="Output as JSON")
def check_rule(
    project: str | None,
    name: str | None,
    rule_file: str | None,
    check_http: bool,
    check_ssh: bool,
    check_https: bool,
    check_rdp: bool,
    port_protocols: list[tuple[str, list[str]]],
    source_tags: list[str] | None,
    target_tags: list[str] | None,
    ip_ranges: list[str] | None,
    only: bool,
    deny: bool,
    output_json: bool,
):
    """Check what a firewall rule allows.

    Exits 0 when every check meets the expectation (allowed, or denied
    with --deny), 1 when one does not, 2 when the rule cannot be
    evaluated.

    Examples:
        fwinspect firewall check -p my-project -n allow-ssh --ssh
        fwinspect firewall check -f web.json --port tcp:8080 --deny
        fwinspect firewall check -f web.json --ip-ranges 0.0.0.0/0 --deny
        fwinspect firewall check -f web.json --target-tags web --only
    """
    checks: list[tuple[str, Callable[[], bool]]] = []

    fw = _load_firewall(project, name, rule_file)

    if check_http:
        checks.append((f"http ({Protocol.TCP.value}:80)", fw.allowed_http))
    if check_ssh:
        checks.append((f"ssh ({Protocol.TCP.value}:22)", fw.allowed_ssh))
    if check_https:
        checks.append((f"https ({Protocol.TCP.value}:443)", fw.allowed_https))
    if check_rdp:
        checks.append((f"rdp ({Protocol.TCP.value}:3389)", fw.allowed_rdp))

    for protocol, ports in port_protocols:
        for port in ports:
            checks.append((
                f"{protocol}:{port}",
                lambda port=port, protocol=protocol: fw.allow_port_protocol(port, protocol),
            ))

    suffix = " (exact)" if only else ""
    if source_tags is not None:
        method = fw.allow_source_tags_only if only else fw.allow_source_tags
        checks.append((f"source tags {','.join(source_tags)}{suffix}", lambda: method(source_tags)))
    if target_tags is not None:
        method_t = fw.allow_target_tags_only if only else fw.allow_target_tags
        checks.append((f"target tags {','.join(target_tags)}{suffix}", lambda: method_t(target_tags)))
    if ip_ranges is not None:
        method_r = fw.allow_ip_ranges_only if only else fw.allow_ip_ranges
        checks.append((f"ip ranges {','.join(ip_ranges)}{suffix}", lambda: method_r(ip_ranges)))

    if not checks:
        console.print("[yellow]No checks requested[/yellow]")
        raise SystemExit(2)

    results = []
    try:
        for label, check in checks:
            allowed = check()
            logger.debug("%s: %s -> %s", fw, label, allowed)
            results.append((label, allowed, allowed != deny))
    except FirewallCheckError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(2)

    passed = all(ok for _, _, ok in results)

    if output_json:
        click.echo(json.dumps({
            "firewall": fw.display_name,
            "expect": "deny" if deny else "allow",
            "passed": passed,
            "checks": [
                {"check": label, "allowed": allowed, "passed": ok}
                for label, allowed, ok in results
            ],
        }, indent=2))
    else:
        console.print(Panel(f"[bold]Compliance: {fw}[/bold]"))
        table = Table()
        table.add_column("Check", style="cyan")
        table.add_column("Allowed")
        table.add_column("Result")
        for label, allowed, ok in results:
            table.add_row(
                label,
                "yes" if allowed else "no",
                "[green]PASS[/green]" if ok else "[red]FAIL[/red]",
            )
        console.print(table)

    if not passed:
        raise SystemExit(1)
